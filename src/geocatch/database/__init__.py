"""Database package: engine, sessions and dialect helpers."""

from geocatch.database.session import (
    async_session_factory,
    close_db,
    init_db,
    session_scope,
)
from geocatch.database.upsert import insert_for

__all__ = [
    "async_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "insert_for",
]
