"""Tests for the background maintenance pass."""

from datetime import timedelta

from sqlalchemy import func, select

from factories import create_creature, create_gym, create_presence, create_spawn, create_user
from geocatch.database.models import Spawn
from geocatch.main import run_maintenance_pass


async def test_sweeps_expired_and_spawns_at_busy_gym(session, session_factory):
    await create_creature(session, 1, "common")
    await create_creature(session, 2, "epic")
    await create_spawn(session, 1, 1.0, 1.0, expires_in=timedelta(minutes=-1))
    await create_spawn(session, 1, 1.0, 1.0)

    gym = await create_gym(session, 5.0, 5.0)
    for user_id in range(1, 6):
        await create_user(session, user_id)
        await create_presence(session, gym, user_id)

    assert await run_maintenance_pass(session_factory) == (1, 1)

    result = await session.execute(select(func.count(Spawn.id)))
    assert result.scalar_one() == 2


async def test_quiet_pass(session_factory):
    assert await run_maintenance_pass(session_factory) == (0, 0)
