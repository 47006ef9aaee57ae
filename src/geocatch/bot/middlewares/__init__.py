"""Middlewares shared by every update type the bot handles."""

from aiogram import Dispatcher

from geocatch.bot.middlewares.database import SessionMiddleware
from geocatch.bot.middlewares.user import UserMiddleware


def register_all_middlewares(dp: Dispatcher) -> None:
    """Attach session and user middlewares, in that order, to each observer."""
    for observer in (dp.message, dp.edited_message, dp.callback_query):
        observer.middleware(SessionMiddleware())
        observer.middleware(UserMiddleware())


__all__ = ["register_all_middlewares", "SessionMiddleware", "UserMiddleware"]
