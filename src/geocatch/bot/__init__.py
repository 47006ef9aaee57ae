"""Telegram front end: bot and dispatcher factories."""

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.redis import RedisStorage
from redis.asyncio import Redis

from geocatch.config import settings


def create_bot() -> Bot:
    """Create the Telegram bot with HTML parse mode."""
    return Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(
            parse_mode=ParseMode.HTML,
            link_preview_is_disabled=True,
        ),
    )


def create_dispatcher(redis: Redis) -> Dispatcher:
    """Create the dispatcher.

    The Redis client backs FSM storage and is also injected into handlers as
    ``redis`` for per-user spawn cooldowns.
    """
    from geocatch.bot.handlers import register_all_handlers
    from geocatch.bot.middlewares import register_all_middlewares

    dp = Dispatcher(storage=RedisStorage(redis=redis), redis=redis)
    register_all_middlewares(dp)
    register_all_handlers(dp)
    return dp


__all__ = ["create_bot", "create_dispatcher"]
