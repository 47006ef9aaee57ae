"""Row factories for tests."""

import math
import uuid
from datetime import timedelta

from geocatch.core.clock import utcnow
from geocatch.core.constants import EARTH_RADIUS_METERS
from geocatch.database.models import CreatureType, Gym, GymPresence, Spawn, User


def meters_north(lat: float, meters: float) -> float:
    """Latitude exactly ``meters`` north along the meridian (haversine-exact)."""
    return lat + math.degrees(meters / EARTH_RADIUS_METERS)


async def create_user(session, telegram_id: int = 1000, **kwargs) -> User:
    user = User(telegram_id=telegram_id, username=f"trainer{telegram_id}", total_catches=0, **kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_creature(
    session,
    creature_id: int,
    rarity: str = "common",
    region_locked: bool = False,
    allowed_countries: list[str] | None = None,
    name: str | None = None,
) -> CreatureType:
    creature = CreatureType(
        id=creature_id,
        name=name or f"Creature{creature_id}",
        rarity=rarity,
        region_locked=region_locked,
        allowed_countries=allowed_countries or [],
        base_spawn_weight=1.0,
    )
    session.add(creature)
    await session.commit()
    return creature


async def create_gym(session, latitude: float = 0.0, longitude: float = 0.0, name: str = "Test Gym") -> Gym:
    gym = Gym(id=uuid.uuid4(), name=name, latitude=latitude, longitude=longitude)
    session.add(gym)
    await session.commit()
    return gym


async def create_spawn(
    session,
    creature_type_id: int,
    latitude: float = 0.0,
    longitude: float = 0.0,
    expires_in: timedelta = timedelta(minutes=15),
    gym_id: uuid.UUID | None = None,
) -> Spawn:
    now = utcnow()
    spawn = Spawn(
        id=uuid.uuid4(),
        creature_type_id=creature_type_id,
        latitude=latitude,
        longitude=longitude,
        created_at=now,
        expires_at=now + expires_in,
        gym_id=gym_id,
    )
    session.add(spawn)
    await session.commit()
    return spawn


async def create_presence(
    session,
    gym: Gym,
    user_id: int,
    meters_away: float = 10.0,
    age: timedelta = timedelta(0),
) -> GymPresence:
    presence = GymPresence(
        gym_id=gym.id,
        user_id=user_id,
        latitude=meters_north(gym.latitude, meters_away),
        longitude=gym.longitude,
        updated_at=utcnow() - age,
    )
    session.add(presence)
    await session.commit()
    return presence
