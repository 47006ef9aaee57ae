"""Dialect-aware INSERT ... ON CONFLICT helper."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(session: AsyncSession, table):
    """Return an ``insert`` construct supporting ``on_conflict_do_update``.

    PostgreSQL in production, SQLite in tests; both expose the same API.
    """
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)
