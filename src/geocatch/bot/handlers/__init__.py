"""Routers for commands, shared locations and catch buttons."""

from aiogram import Dispatcher

from geocatch.bot.handlers import catch, gyms, location, start


def register_all_handlers(dp: Dispatcher) -> None:
    """Include every router with the dispatcher."""
    dp.include_routers(start.router, gyms.router, catch.router, location.router)


__all__ = ["register_all_handlers"]
