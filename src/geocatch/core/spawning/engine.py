"""Spawning engine for wild creatures around players."""

from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.core.clock import utcnow
from geocatch.core.exceptions import AuthRequiredError, PersistenceError
from geocatch.core.geo import (
    bounding_box,
    distance_meters,
    lon_bounds_usable,
    validate_coordinate,
    validate_radius,
)
from geocatch.core.spawning.grid import SpawnGrid
from geocatch.database.models import CreatureType, Spawn
from geocatch.logging import get_logger

logger = get_logger(__name__)


def spawn_expiry(now: datetime | None = None) -> datetime:
    """Get the expiry time for a spawn created now."""
    return (now or utcnow()) + timedelta(minutes=settings.spawn_ttl_minutes)


async def get_eligible_creature_types(
    session: AsyncSession,
    country_code: str | None = None,
) -> list[CreatureType]:
    """Get creature types allowed to spawn in a country.

    Non-region-locked types are always eligible. Region-locked types are
    eligible only when ``country_code`` is in their allowed list; with no
    country code they are excluded.
    """
    result = await session.execute(
        select(CreatureType)
        .where(CreatureType.region_locked.is_(False))
        .order_by(CreatureType.id)
    )
    creature_types = list(result.scalars().all())

    if country_code:
        result = await session.execute(
            select(CreatureType)
            .where(CreatureType.region_locked.is_(True))
            .order_by(CreatureType.id)
        )
        # JSON arrays can't be searched portably, filter here
        creature_types.extend(
            creature for creature in result.scalars().all()
            if creature.is_available_in(country_code)
        )

    return creature_types


async def generate_spawns(
    session: AsyncSession,
    user_id: int | None,
    latitude: float,
    longitude: float,
    radius_meters: float | None = None,
    in_park: bool = False,
    country_code: str | None = None,
    grid: SpawnGrid | None = None,
) -> int:
    """Generate and persist a batch of spawns around a player.

    Args:
        session: Database session
        user_id: Authenticated user requesting the spawns, None if anonymous
        latitude: Player latitude
        longitude: Player longitude
        radius_meters: Upper bound on spawn distance; the grid's own
            maximum distance still applies
        in_park: Park boost flag supplied by the caller
        country_code: Country for region-locked creatures, None if unknown
        grid: Grid to use, built from settings if omitted

    Returns:
        Number of spawns created (may be 0)

    Raises:
        AuthRequiredError: If no user is authenticated
        InvalidCoordinateError: If the coordinate is invalid
        ValueError: If the radius is not a positive finite number
        PersistenceError: If the batch could not be stored; nothing is stored
    """
    if user_id is None:
        raise AuthRequiredError("generate_spawns")
    validate_coordinate(latitude, longitude)
    if radius_meters is None:
        radius_meters = settings.spawn_search_radius_meters
    validate_radius(radius_meters)

    creature_types = await get_eligible_creature_types(session, country_code)
    if not creature_types:
        logger.warning("No creature types available for spawning", country_code=country_code)
        return 0

    grid = grid or SpawnGrid()
    candidates = grid.generate(
        latitude,
        longitude,
        creature_types,
        in_park=in_park,
        max_distance=radius_meters,
    )

    if not candidates:
        logger.debug("Grid produced no spawns", lat=latitude, lon=longitude, in_park=in_park)
        return 0

    now = utcnow()
    expires_at = spawn_expiry(now)
    spawns = [
        Spawn(
            creature_type_id=candidate.creature.id,
            latitude=candidate.latitude,
            longitude=candidate.longitude,
            created_at=now,
            expires_at=expires_at,
            in_park=candidate.in_park,
        )
        for candidate in candidates
    ]

    try:
        session.add_all(spawns)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(
            "Failed to persist spawns",
            user_id=user_id,
            count=len(spawns),
            error=str(e),
        )
        raise PersistenceError(f"Could not store {len(spawns)} spawns") from e

    logger.info(
        "Generated spawns",
        user_id=user_id,
        count=len(spawns),
        lat=latitude,
        lon=longitude,
        in_park=in_park,
        country_code=country_code,
    )
    return len(spawns)


async def get_nearby_spawns(
    session: AsyncSession,
    latitude: float,
    longitude: float,
    radius_meters: float | None = None,
    limit: int | None = None,
) -> list[Spawn]:
    """Get live, non-gym spawns within a radius, nearest first.

    Gym-bound spawns are excluded; they are only shown through the gym feed.
    """
    validate_coordinate(latitude, longitude)
    if radius_meters is None:
        radius_meters = settings.spawn_search_radius_meters
    validate_radius(radius_meters)
    if limit is None:
        limit = settings.nearby_spawn_limit

    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_meters)
    query = (
        select(Spawn)
        .where(Spawn.expires_at > utcnow())
        .where(Spawn.gym_id.is_(None))
        .where(Spawn.latitude.between(min_lat, max_lat))
    )
    if lon_bounds_usable(min_lon, max_lon):
        query = query.where(Spawn.longitude.between(min_lon, max_lon))

    result = await session.execute(query)
    spawns = result.scalars().unique().all()

    nearby = []
    for spawn in spawns:
        distance = distance_meters(latitude, longitude, spawn.latitude, spawn.longitude)
        if distance <= radius_meters:
            nearby.append((distance, str(spawn.id), spawn))

    nearby.sort(key=lambda item: (item[0], item[1]))
    return [spawn for _, _, spawn in nearby[:limit]]


async def cleanup_expired_spawns(session: AsyncSession) -> int:
    """Delete expired spawns. Returns the number removed."""
    result = await session.execute(
        delete(Spawn).where(Spawn.expires_at <= utcnow())
    )
    await session.commit()

    removed = result.rowcount or 0
    if removed:
        logger.info("Cleaned up expired spawns", count=removed)
    return removed
