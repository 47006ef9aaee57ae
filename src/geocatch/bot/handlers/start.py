"""Start, help and region handlers."""

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.config import settings
from geocatch.database.models import User

router = Router(name="start")

WELCOME_MESSAGE = """
<b>Welcome to GeoCatch, {name}!</b>

Creatures appear around you in the real world.

<b>How to play:</b>
1. Share your location (or live location) with me
2. I'll show the creatures near you
3. Walk within {catch_radius}m and tap <b>Catch</b>

Gather {quorum}+ trainers at a gym to unlock epic and legendary creatures!

Use /help to see all commands.
"""

HELP_MESSAGE = """
<b>Commands</b>

📍 <i>Send a location</i> - find creatures near you
/gyms - gyms near your last location
/collection - your latest catches
/region &lt;CC&gt; - set your country (e.g. /region JP) for regional creatures
/help - this message
"""


@router.message(CommandStart())
async def cmd_start(message: Message, user: User) -> None:
    """Handle /start command."""
    await message.answer(
        WELCOME_MESSAGE.format(
            name=user.display_name,
            catch_radius=round(settings.catch_radius_meters),
            quorum=settings.gym_quorum,
        )
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_MESSAGE)


@router.message(Command("region"))
async def cmd_region(message: Message, session: AsyncSession, user: User) -> None:
    """Handle /region command."""
    args = (message.text or "").split(maxsplit=1)
    if len(args) < 2:
        current = user.country_code or "not set"
        await message.answer(f"Your region: <b>{current}</b>\nUsage: /region [country code]")
        return

    code = args[1].strip().upper()
    if len(code) != 2 or not code.isalpha():
        await message.answer("Please use a two-letter country code, e.g. /region US")
        return

    user.country_code = code
    await session.commit()
    await message.answer(f"Region set to <b>{code}</b>. Regional creatures may now appear!")
