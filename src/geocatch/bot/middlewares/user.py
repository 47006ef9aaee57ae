"""User loading middleware.

This is the identity provider for the engine: the Telegram account behind
an update is the authenticated player.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geocatch.database import insert_for
from geocatch.database.models import User


class UserMiddleware(BaseMiddleware):
    """Middleware to load or create user for each request."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Load or create user and inject into handler data."""
        session: AsyncSession | None = data.get("session")
        if not session:
            return await handler(event, data)

        user_info = None
        if isinstance(event, (Message, CallbackQuery)) and event.from_user:
            user_info = event.from_user

        if not user_info:
            data["user"] = None
            return await handler(event, data)

        # Upsert to avoid races between concurrent updates from one user
        stmt = insert_for(session, User).values(
            telegram_id=user_info.id,
            username=user_info.username,
            first_name=user_info.first_name,
            last_name=user_info.last_name,
            total_catches=0,
        ).on_conflict_do_update(
            index_elements=[User.telegram_id],
            set_={
                "username": user_info.username,
                "first_name": user_info.first_name,
                "last_name": user_info.last_name,
            },
        )
        await session.execute(stmt)
        await session.commit()

        result = await session.execute(
            select(User).where(User.telegram_id == user_info.id)
        )
        data["user"] = result.scalar_one()
        structlog.contextvars.bind_contextvars(user_id=user_info.id)
        return await handler(event, data)
