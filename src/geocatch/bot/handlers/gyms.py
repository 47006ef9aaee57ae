"""Gym handlers - nearby gyms, quorum status and gym spawns."""

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, Message
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.core.gyms import count_players_at_gym, get_gym_spawns, get_nearby_gyms
from geocatch.database.models import User
from geocatch.utils.formatting import format_gym_line, rarity_label

router = Router(name="gyms")

GYM_SEARCH_RADIUS_METERS = 1000
MAX_LISTED_GYMS = 5


@router.message(Command("gyms"))
async def cmd_gyms(message: Message, session: AsyncSession, user: User) -> None:
    """Handle /gyms command."""
    if not user.has_location:
        await message.answer("📍 Share your location first!")
        return

    nearby = await get_nearby_gyms(
        session,
        user.last_latitude,
        user.last_longitude,
        GYM_SEARCH_RADIUS_METERS,
    )
    if not nearby:
        await message.answer("No gyms within 1km of you.")
        return

    lines = []
    buttons = []
    for gym, distance in nearby[:MAX_LISTED_GYMS]:
        players = await count_players_at_gym(session, gym.id)
        lines.append(format_gym_line(gym.name, distance, players, settings.gym_quorum))
        for spawn in await get_gym_spawns(session, gym.id):
            lines.append(f"    └ {spawn.creature_type.name} {rarity_label(spawn.creature_type.rarity)}")
            buttons.append([
                InlineKeyboardButton(
                    text=f"Catch {spawn.creature_type.name} @ {gym.name}",
                    callback_data=f"catch:{spawn.id}",
                )
            ])

    await message.answer(
        "🏟 <b>Gyms near you</b>\n\n" + "\n".join(lines),
        reply_markup=InlineKeyboardMarkup(inline_keyboard=buttons) if buttons else None,
    )
