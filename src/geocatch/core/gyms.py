"""Gym presence tracking and quorum-gated epic/legendary spawns.

Players near a gym report their position, which is kept as a presence row
per (gym, user). A gym whose fresh, in-radius presences reach the quorum
gets exactly one high-rarity spawn at a time. The unique index on
``spawns.gym_id`` arbitrates between concurrent checkers.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.core.clock import utcnow
from geocatch.core.constants import GYM_RARITIES, GYM_RARITY_WEIGHTS
from geocatch.core.exceptions import AuthRequiredError, PersistenceError
from geocatch.core.geo import (
    bounding_box,
    distance_meters,
    lon_bounds_usable,
    validate_coordinate,
    validate_radius,
)
from geocatch.core.spawning.engine import spawn_expiry
from geocatch.core.spawning.rarity import RaritySelector
from geocatch.database.models import CreatureType, Gym, GymPresence, Spawn
from geocatch.database.upsert import insert_for
from geocatch.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GymCreature:
    """Detached view of a creature type eligible for gym spawns."""

    id: int
    name: str
    rarity: str


def presence_cutoff(now: datetime | None = None) -> datetime:
    """Presences updated before this moment are stale."""
    return (now or utcnow()) - timedelta(seconds=settings.gym_presence_window_seconds)


# ──────────────────────────────────────────────
# Presence
# ──────────────────────────────────────────────

async def update_presence(
    session: AsyncSession,
    gym_id: uuid.UUID,
    user_id: int | None,
    latitude: float,
    longitude: float,
) -> None:
    """Record a player's position at a gym, refreshing updated_at."""
    if user_id is None:
        raise AuthRequiredError("update_presence")
    validate_coordinate(latitude, longitude)

    now = utcnow()
    stmt = insert_for(session, GymPresence).values(
        gym_id=gym_id,
        user_id=user_id,
        latitude=latitude,
        longitude=longitude,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["gym_id", "user_id"],
        set_={
            "latitude": latitude,
            "longitude": longitude,
            "updated_at": now,
        },
    )

    try:
        await session.execute(stmt)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Could not update presence at gym {gym_id}") from e


async def get_players_near_gym(
    session: AsyncSession,
    gym_id: uuid.UUID,
    radius_meters: float | None = None,
) -> list[tuple[int, float]]:
    """Get (user_id, distance) for fresh presences within radius, nearest first."""
    if radius_meters is None:
        radius_meters = settings.gym_radius_meters
    validate_radius(radius_meters)

    gym = await session.get(Gym, gym_id)
    if gym is None:
        return []

    result = await session.execute(
        select(GymPresence)
        .where(GymPresence.gym_id == gym_id)
        .where(GymPresence.updated_at >= presence_cutoff())
    )

    players = []
    for presence in result.scalars().all():
        distance = distance_meters(gym.latitude, gym.longitude, presence.latitude, presence.longitude)
        if distance <= radius_meters:
            players.append((presence.user_id, distance))

    players.sort(key=lambda item: item[1])
    return players


async def count_players_at_gym(
    session: AsyncSession,
    gym_id: uuid.UUID,
    radius_meters: float | None = None,
) -> int:
    """Count distinct users with a fresh presence within radius of a gym."""
    players = await get_players_near_gym(session, gym_id, radius_meters)
    return len({user_id for user_id, _ in players})


async def get_nearby_gyms(
    session: AsyncSession,
    latitude: float,
    longitude: float,
    radius_meters: float,
) -> list[tuple[Gym, float]]:
    """Get (gym, distance) for gyms within radius of a point, nearest first."""
    validate_coordinate(latitude, longitude)
    validate_radius(radius_meters)

    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_meters)
    query = select(Gym).where(Gym.latitude.between(min_lat, max_lat))
    if lon_bounds_usable(min_lon, max_lon):
        query = query.where(Gym.longitude.between(min_lon, max_lon))

    result = await session.execute(query)

    gyms = []
    for gym in result.scalars().all():
        distance = distance_meters(latitude, longitude, gym.latitude, gym.longitude)
        if distance <= radius_meters:
            gyms.append((gym, distance))

    gyms.sort(key=lambda item: item[1])
    return gyms


async def track_player_at_gyms(
    session: AsyncSession,
    user_id: int | None,
    latitude: float,
    longitude: float,
    gyms: Iterable[Gym] | None = None,
    radius_meters: float | None = None,
) -> list[uuid.UUID]:
    """Update presence at every gym within radius of the player.

    Returns:
        IDs of the gyms the player was recorded at
    """
    if user_id is None:
        raise AuthRequiredError("track_player_at_gyms")
    if radius_meters is None:
        radius_meters = settings.gym_radius_meters
    validate_radius(radius_meters)

    if gyms is None:
        nearby = [gym for gym, _ in await get_nearby_gyms(session, latitude, longitude, radius_meters)]
    else:
        validate_coordinate(latitude, longitude)
        nearby = [
            gym for gym in gyms
            if distance_meters(latitude, longitude, gym.latitude, gym.longitude) <= radius_meters
        ]

    tracked = []
    for gym in nearby:
        await update_presence(session, gym.id, user_id, latitude, longitude)
        tracked.append(gym.id)

    if tracked:
        logger.debug("Tracked player at gyms", user_id=user_id, gyms=[str(g) for g in tracked])
    return tracked


# ──────────────────────────────────────────────
# Gym spawns
# ──────────────────────────────────────────────

async def get_gym_spawns(session: AsyncSession, gym_id: uuid.UUID) -> list[Spawn]:
    """Get live spawns bound to a gym, newest first."""
    result = await session.execute(
        select(Spawn)
        .where(Spawn.gym_id == gym_id)
        .where(Spawn.expires_at > utcnow())
        .order_by(Spawn.created_at.desc())
    )
    return list(result.scalars().all())


async def _quorum_candidate_gyms(session: AsyncSession, quorum: int) -> list[Gym]:
    """Gyms with at least ``quorum`` fresh presences, before the radius check."""
    fresh = (
        select(GymPresence.gym_id)
        .where(GymPresence.updated_at >= presence_cutoff())
        .group_by(GymPresence.gym_id)
        .having(func.count(GymPresence.user_id) >= quorum)
    )
    result = await session.execute(select(Gym).where(Gym.id.in_(fresh)))
    return list(result.scalars().all())


async def _gym_creature_types(session: AsyncSession) -> list[CreatureType]:
    result = await session.execute(
        select(CreatureType)
        .where(CreatureType.rarity.in_(GYM_RARITIES))
        .where(CreatureType.region_locked.is_(False))
        .order_by(CreatureType.id)
    )
    return list(result.scalars().all())


async def _gym_has_spawn_row(session: AsyncSession, gym_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(Spawn.id).where(Spawn.gym_id == gym_id).limit(1)
    )
    return result.first() is not None


async def _spawn_at_gym(
    session: AsyncSession,
    gym_id: uuid.UUID,
    latitude: float,
    longitude: float,
    creature_type_id: int,
) -> bool:
    """Insert a gym spawn. False if another checker got there first."""
    now = utcnow()

    # An expired row would otherwise block the unique gym_id index
    await session.execute(
        delete(Spawn)
        .where(Spawn.gym_id == gym_id)
        .where(Spawn.expires_at <= now)
    )
    session.add(
        Spawn(
            creature_type_id=creature_type_id,
            latitude=latitude,
            longitude=longitude,
            created_at=now,
            expires_at=spawn_expiry(now),
            gym_id=gym_id,
        )
    )

    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        # Only a row now holding the gym_id slot means another checker won
        if not await _gym_has_spawn_row(session, gym_id):
            raise PersistenceError(f"Could not create spawn at gym {gym_id}") from e
        logger.info("Gym spawn already exists, skipping", gym_id=str(gym_id))
        return False
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Could not create spawn at gym {gym_id}") from e
    return True


async def check_and_spawn_gym_creatures(
    session: AsyncSession,
    selector: RaritySelector | None = None,
) -> list[uuid.UUID]:
    """Create one epic/legendary spawn at every gym that has reached quorum.

    Gyms that already have a live gym spawn are left alone.

    Returns:
        IDs of gyms that received a new spawn
    """
    quorum = settings.gym_quorum
    selector = selector or RaritySelector(
        weights=GYM_RARITY_WEIGHTS,
        boosted_weights=GYM_RARITY_WEIGHTS,
    )

    gyms = await _quorum_candidate_gyms(session, quorum)
    if not gyms:
        return []

    creature_types = await _gym_creature_types(session)
    if not creature_types:
        logger.warning("No epic or legendary creature types available for gym spawns")
        return []

    # A lost race rolls the session back and expires loaded instances
    sites = [(gym.id, gym.name, gym.latitude, gym.longitude) for gym in gyms]
    creatures = [
        GymCreature(id=c.id, name=c.name, rarity=c.rarity) for c in creature_types
    ]

    spawned: list[uuid.UUID] = []
    for gym_id, gym_name, gym_lat, gym_lon in sites:
        players = await count_players_at_gym(session, gym_id)
        if players < quorum:
            continue

        if await get_gym_spawns(session, gym_id):
            continue

        creature = selector.select(creatures)
        if not await _spawn_at_gym(session, gym_id, gym_lat, gym_lon, creature.id):
            continue

        spawned.append(gym_id)
        logger.info(
            "Spawned gym creature",
            gym_id=str(gym_id),
            gym=gym_name,
            creature=creature.name,
            rarity=creature.rarity,
            players=players,
        )

    return spawned
