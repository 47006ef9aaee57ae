"""Main entry point for the GeoCatch bot."""

import asyncio
import sys

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from geocatch.bot import create_bot, create_dispatcher
from geocatch.config import settings
from geocatch.core.gyms import check_and_spawn_gym_creatures
from geocatch.core.spawning import cleanup_expired_spawns
from geocatch.database import async_session_factory, close_db, init_db
from geocatch.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def run_maintenance_pass(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> tuple[int, int]:
    """Spawn at gyms that reached quorum, then sweep expired spawns.

    Returns:
        (gym spawns created, expired spawns removed)
    """
    async with session_factory() as session:
        spawned = await check_and_spawn_gym_creatures(session)
        removed = await cleanup_expired_spawns(session)

    if spawned or removed:
        logger.info(
            "Maintenance pass complete",
            gym_spawns=len(spawned),
            expired_removed=removed,
        )
    return len(spawned), removed


async def maintenance_loop() -> None:
    """Background task running a maintenance pass every interval.

    A failed pass is logged and the next one starts from scratch.
    """
    while True:
        try:
            await run_maintenance_pass()
        except Exception as e:
            logger.error("Error in maintenance loop", error=str(e))

        await asyncio.sleep(settings.maintenance_interval_seconds)


async def main() -> None:
    """Main function to run the bot."""
    setup_logging()
    logger.info("Starting GeoCatch bot...")

    try:
        await init_db()
        logger.info("Database connection established")
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        sys.exit(1)

    redis = Redis.from_url(settings.redis_url)
    bot = create_bot()
    dp = create_dispatcher(redis)
    maintenance_task = None

    try:
        bot_info = await bot.get_me()
        logger.info("Bot started", username=bot_info.username, bot_id=bot_info.id)

        maintenance_task = asyncio.create_task(maintenance_loop())
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())

    except Exception as e:
        logger.error("Bot error", error=str(e))
        raise
    finally:
        if maintenance_task:
            maintenance_task.cancel()
        await bot.session.close()
        await redis.aclose()
        await close_db()
        logger.info("Bot stopped")


def run() -> None:
    """Entry point for the application."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
