"""Catch validation and recording.

A catch passes through a fixed series of gates (spawn exists, not expired,
player in range, gym quorum) before the spawn is consumed. Consumption is a
single transaction whose first write is the DELETE of the spawn row: the
delete is the arbiter, so when two players race for the same spawn only
one of them sees a row deleted and the other gets ``AlreadyCaughtError``.
"""

import random
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.core.clock import utcnow
from geocatch.core.constants import CP_LEVEL_MAX, CP_LEVEL_MIN
from geocatch.core.exceptions import (
    AlreadyCaughtError,
    AuthRequiredError,
    OutOfRangeError,
    PersistenceError,
    QuorumNotMetError,
    SpawnExpiredError,
    SpawnNotFoundError,
)
from geocatch.core.geo import distance_meters, validate_coordinate
from geocatch.core.gyms import count_players_at_gym
from geocatch.database.models import Catch, Spawn, User
from geocatch.logging import get_logger

logger = get_logger(__name__)


def roll_cp_level(rng: random.Random | None = None) -> int:
    """Roll a CP level uniformly in [CP_LEVEL_MIN, CP_LEVEL_MAX]."""
    return (rng or random).randint(CP_LEVEL_MIN, CP_LEVEL_MAX)


async def attempt_catch(
    session: AsyncSession,
    user_id: int | None,
    spawn_id: uuid.UUID,
    latitude: float,
    longitude: float,
    rng: random.Random | None = None,
) -> Catch:
    """Try to catch a spawn from the player's current position.

    Args:
        session: Database session
        user_id: Authenticated user, None if anonymous
        spawn_id: Spawn to catch
        latitude: Player latitude
        longitude: Player longitude
        rng: Random source for the CP roll

    Returns:
        The recorded Catch

    Raises:
        AuthRequiredError: No authenticated user
        InvalidCoordinateError: Player position is not a valid coordinate
        SpawnNotFoundError: Spawn is gone (caught or swept)
        SpawnExpiredError: Spawn exists but its TTL has passed
        OutOfRangeError: Player is farther than the catch radius
        QuorumNotMetError: Gym spawn without enough players present
        AlreadyCaughtError: Another player consumed the spawn first
        PersistenceError: The catch could not be stored
    """
    if user_id is None:
        raise AuthRequiredError("attempt_catch")
    validate_coordinate(latitude, longitude)

    # Fresh read; the identity map may still hold a spawn someone else deleted
    result = await session.execute(
        select(Spawn)
        .where(Spawn.id == spawn_id)
        .execution_options(populate_existing=True)
    )
    spawn = result.scalar_one_or_none()
    if spawn is None:
        raise SpawnNotFoundError()

    if spawn.expires_at <= utcnow():
        raise SpawnExpiredError()

    distance = distance_meters(latitude, longitude, spawn.latitude, spawn.longitude)
    if distance > settings.catch_radius_meters:
        raise OutOfRangeError(distance, settings.catch_radius_meters)

    if spawn.gym_id is not None:
        players = await count_players_at_gym(session, spawn.gym_id)
        if players < settings.gym_quorum:
            raise QuorumNotMetError(players, settings.gym_quorum)

    creature_type = spawn.creature_type
    creature_type_id = spawn.creature_type_id
    cp_level = roll_cp_level(rng)

    try:
        deleted = await session.execute(
            delete(Spawn)
            .where(Spawn.id == spawn_id)
            .execution_options(synchronize_session=False)
        )
        if deleted.rowcount == 0:
            await session.rollback()
            logger.info("Lost catch race", user_id=user_id, spawn_id=str(spawn_id))
            raise AlreadyCaughtError()

        catch = Catch(
            user_id=user_id,
            creature_type_id=creature_type_id,
            creature_type=creature_type,
            catch_latitude=latitude,
            catch_longitude=longitude,
            cp_level=cp_level,
            caught_at=utcnow(),
        )
        session.add(catch)

        await session.execute(
            update(User)
            .where(User.telegram_id == user_id)
            .values(total_catches=User.total_catches + 1)
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(
            "Failed to record catch",
            user_id=user_id,
            spawn_id=str(spawn_id),
            error=str(e),
        )
        raise PersistenceError(f"Could not record catch of spawn {spawn_id}") from e

    logger.info(
        "Creature caught",
        user_id=user_id,
        spawn_id=str(spawn_id),
        creature_type_id=creature_type_id,
        cp_level=cp_level,
        distance=round(distance, 1),
    )
    return catch


async def get_user_catches(
    session: AsyncSession,
    user_id: int,
    limit: int = 20,
) -> list[Catch]:
    """Get a user's most recent catches."""
    result = await session.execute(
        select(Catch)
        .where(Catch.user_id == user_id)
        .order_by(Catch.caught_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
