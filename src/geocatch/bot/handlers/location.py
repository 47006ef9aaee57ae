"""Location handlers - spawn generation, gym tracking and the nearby list."""

from aiogram import F, Router
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, Message
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.bot.throttle import acquire_cooldown
from geocatch.config import settings
from geocatch.core.clock import utcnow
from geocatch.core.exceptions import PersistenceError
from geocatch.core.geo import distance_meters, format_distance, is_valid_coordinate
from geocatch.core.gyms import track_player_at_gyms
from geocatch.core.spawning import generate_spawns, get_nearby_spawns
from geocatch.database.models import Spawn, User
from geocatch.logging import get_logger
from geocatch.utils.formatting import format_spawn_line

router = Router(name="location")
logger = get_logger(__name__)

MAX_LISTED_SPAWNS = 10


def build_spawn_keyboard(spawns: list[Spawn], lat: float, lon: float) -> InlineKeyboardMarkup:
    """One Catch button per spawn."""
    rows = []
    for spawn in spawns:
        distance = distance_meters(lat, lon, spawn.latitude, spawn.longitude)
        rows.append([
            InlineKeyboardButton(
                text=f"Catch {spawn.creature_type.name} ({format_distance(distance)})",
                callback_data=f"catch:{spawn.id}",
            )
        ])
    return InlineKeyboardMarkup(inline_keyboard=rows)


async def process_location(
    session: AsyncSession,
    redis: Redis,
    user: User,
    latitude: float,
    longitude: float,
) -> int:
    """Store the player's position, track gyms and maybe generate spawns.

    Returns:
        Number of spawns generated (0 when throttled)
    """
    # A failed presence write rolls back and expires the loaded user
    user_id = user.telegram_id
    country_code = user.country_code

    user.last_latitude = latitude
    user.last_longitude = longitude
    user.last_location_at = utcnow()
    await session.commit()

    try:
        await track_player_at_gyms(session, user_id, latitude, longitude)
    except PersistenceError as e:
        logger.error("Gym tracking failed", user_id=user_id, error=str(e))

    if not await acquire_cooldown(
        redis,
        f"spawn:{user_id}",
        settings.spawn_request_cooldown_seconds,
    ):
        return 0

    try:
        return await generate_spawns(
            session,
            user_id,
            latitude,
            longitude,
            settings.spawn_search_radius_meters,
            in_park=False,
            country_code=country_code,
        )
    except PersistenceError as e:
        logger.error("Spawn generation failed", user_id=user_id, error=str(e))
        return 0


@router.message(F.location)
async def on_location(message: Message, session: AsyncSession, user: User, redis: Redis) -> None:
    """Handle a shared location: generate spawns and list what's nearby."""
    latitude = message.location.latitude
    longitude = message.location.longitude
    if not is_valid_coordinate(latitude, longitude):
        await message.answer("That location doesn't look right. Please try again.")
        return

    await process_location(session, redis, user, latitude, longitude)

    spawns = await get_nearby_spawns(session, latitude, longitude)
    if not spawns:
        await message.answer(
            "No creatures around right now. Keep walking and share your location again!"
        )
        return

    now = utcnow()
    listed = spawns[:MAX_LISTED_SPAWNS]
    lines = [
        format_spawn_line(
            spawn.creature_type.name,
            spawn.creature_type.rarity,
            distance_meters(latitude, longitude, spawn.latitude, spawn.longitude),
            spawn.expires_at,
            now,
        )
        for spawn in listed
    ]
    more = f"\n<i>...and {len(spawns) - len(listed)} more</i>" if len(spawns) > len(listed) else ""

    await message.answer(
        f"🐾 <b>Creatures nearby ({len(spawns)})</b>\n\n" + "\n".join(lines) + more,
        reply_markup=build_spawn_keyboard(listed, latitude, longitude),
    )


@router.edited_message(F.location)
async def on_live_location(message: Message, session: AsyncSession, user: User, redis: Redis) -> None:
    """Handle live location updates silently."""
    latitude = message.location.latitude
    longitude = message.location.longitude
    if not is_valid_coordinate(latitude, longitude):
        return

    await process_location(session, redis, user, latitude, longitude)
