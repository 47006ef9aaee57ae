"""Catching-related handlers."""

import uuid
from datetime import timedelta

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.core.catching import attempt_catch, get_user_catches
from geocatch.core.clock import utcnow
from geocatch.core.exceptions import CatchError, PersistenceError
from geocatch.database.models import User
from geocatch.logging import get_logger
from geocatch.utils.formatting import format_catch_summary

router = Router(name="catch")
logger = get_logger(__name__)


def _location_is_fresh(user: User) -> bool:
    if not user.has_location or user.last_location_at is None:
        return False
    max_age = timedelta(seconds=settings.gym_presence_window_seconds)
    return utcnow() - user.last_location_at <= max_age


@router.callback_query(F.data.startswith("catch:"))
async def callback_catch(callback: CallbackQuery, session: AsyncSession, user: User) -> None:
    """Handle a Catch button press."""
    try:
        spawn_id = uuid.UUID(callback.data.split(":", 1)[1])
    except (IndexError, ValueError):
        await callback.answer("Invalid creature!", show_alert=True)
        return

    if not _location_is_fresh(user):
        await callback.answer(
            "📍 Share your current location first so I know where you are!",
            show_alert=True,
        )
        return

    try:
        catch = await attempt_catch(
            session,
            user.telegram_id,
            spawn_id,
            user.last_latitude,
            user.last_longitude,
        )
    except CatchError as e:
        await callback.answer(e.message, show_alert=True)
        return
    except PersistenceError:
        await callback.answer("Something went wrong, please try again.", show_alert=True)
        return

    await callback.answer("Gotcha!")
    if callback.message:
        await callback.message.answer(
            f"🎉 <b>Congratulations {user.display_name}!</b>\n\n"
            f"You caught {format_catch_summary(catch.creature_type.name, catch.creature_type.rarity, catch.cp_level)}!"
        )


@router.message(Command("collection"))
async def cmd_collection(message: Message, session: AsyncSession, user: User) -> None:
    """Handle /collection command."""
    catches = await get_user_catches(session, user.telegram_id, limit=15)
    if not catches:
        await message.answer("You haven't caught anything yet. Share your location to start!")
        return

    lines = [
        format_catch_summary(c.creature_type.name, c.creature_type.rarity, c.cp_level)
        for c in catches
    ]
    await message.answer(
        f"📚 <b>Your catches</b> (total {user.total_catches})\n\n" + "\n".join(lines)
    )
