"""Per-update database session and log context."""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from geocatch.database import session_scope


class SessionMiddleware(BaseMiddleware):
    """Open one session per update and tag log lines with the update type."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(update=type(event).__name__)

        async with session_scope() as session:
            data["session"] = session
            return await handler(event, data)
