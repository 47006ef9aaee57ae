"""Pytest configuration and fixtures for GeoCatch tests."""

import os

# Settings require a bot token at import time
os.environ.setdefault("BOT_TOKEN", "123456:test-token")

import random  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from geocatch.database.models import Base  # noqa: E402


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so separate sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{(tmp_path / 'geocatch.db').as_posix()}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
