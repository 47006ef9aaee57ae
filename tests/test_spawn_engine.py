"""Tests for spawn generation, nearby queries and cleanup."""

import random
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from factories import create_creature, create_gym, create_spawn, create_user, meters_north
from geocatch.core.exceptions import AuthRequiredError, InvalidCoordinateError, PersistenceError
from geocatch.core.geo import distance_meters
from geocatch.core.spawning import (
    GridConfig,
    RaritySelector,
    SpawnGrid,
    cleanup_expired_spawns,
    generate_spawns,
    get_eligible_creature_types,
    get_nearby_spawns,
)
from geocatch.database.models import Spawn


def always_grid(seed: int = 3) -> SpawnGrid:
    rng = random.Random(seed)
    return SpawnGrid(
        config=GridConfig(cell_probability=1.0),
        selector=RaritySelector(rng=rng),
        rng=rng,
    )


async def count_spawns(session) -> int:
    result = await session.execute(select(func.count(Spawn.id)))
    return result.scalar_one()


@pytest.fixture
async def commons(session):
    return [await create_creature(session, i, "common") for i in range(1, 11)]


class TestGenerateSpawns:
    async def test_end_to_end_at_origin(self, session, commons, seeded_rng):
        user = await create_user(session)
        grid = SpawnGrid(selector=RaritySelector(rng=seeded_rng), rng=seeded_rng)

        count = await generate_spawns(session, user.telegram_id, 0, 0, 500, False, None, grid=grid)

        assert count >= 0
        result = await session.execute(select(Spawn))
        spawns = result.scalars().all()
        assert len(spawns) == count
        for spawn in spawns:
            assert distance_meters(0, 0, spawn.latitude, spawn.longitude) <= 150
            assert spawn.expires_at - spawn.created_at == timedelta(minutes=15)
            assert spawn.gym_id is None
            assert spawn.in_park is False
            assert spawn.creature_type_id in {c.id for c in commons}

    async def test_forced_grid_creates_every_cell(self, session, commons):
        user = await create_user(session)

        count = await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid())

        assert count == 28
        assert await count_spawns(session) == 28

    async def test_anonymous_rejected(self, session, commons):
        with pytest.raises(AuthRequiredError):
            await generate_spawns(session, None, 0, 0, 500, grid=always_grid())

        assert await count_spawns(session) == 0

    async def test_invalid_coordinates_rejected(self, session, commons):
        user = await create_user(session)

        with pytest.raises(InvalidCoordinateError):
            await generate_spawns(session, user.telegram_id, 91, 0, 500, grid=always_grid())
        with pytest.raises(InvalidCoordinateError):
            await generate_spawns(session, user.telegram_id, 0, float("nan"), 500, grid=always_grid())

    @pytest.mark.parametrize("radius", [float("nan"), float("inf"), -10.0, 0])
    async def test_bad_radius_rejected(self, session, commons, radius):
        user = await create_user(session)

        with pytest.raises(ValueError):
            await generate_spawns(session, user.telegram_id, 0, 0, radius, grid=always_grid())

        assert await count_spawns(session) == 0

    async def test_empty_catalog_returns_zero(self, session):
        user = await create_user(session)

        assert await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid()) == 0

    async def test_region_locked_excluded_for_other_country(self, session, commons):
        await create_creature(session, 50, "rare", region_locked=True, allowed_countries=["JP"])
        user = await create_user(session)

        count = await generate_spawns(
            session, user.telegram_id, 0, 0, 500, country_code="US", grid=always_grid()
        )

        assert count > 0
        result = await session.execute(select(Spawn.creature_type_id))
        assert 50 not in set(result.scalars().all())

    async def test_park_flag_recorded(self, session, commons):
        user = await create_user(session)

        await generate_spawns(session, user.telegram_id, 0, 0, 500, in_park=True, grid=always_grid())

        result = await session.execute(select(Spawn.in_park))
        assert set(result.scalars().all()) == {True}

    async def test_repeated_calls_accumulate(self, session, commons):
        user = await create_user(session)

        await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid())
        await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid())

        assert await count_spawns(session) == 56

    async def test_failed_commit_persists_nothing(self, session, session_factory, commons, monkeypatch):
        user = await create_user(session)

        async def failing_commit():
            raise OperationalError("INSERT INTO spawns", {}, Exception("disk I/O error"))

        monkeypatch.setattr(session, "commit", failing_commit)

        with pytest.raises(PersistenceError):
            await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid())

        async with session_factory() as fresh:
            assert await count_spawns(fresh) == 0


class TestEligibleCreatureTypes:
    @pytest.fixture
    async def catalog(self, session):
        await create_creature(session, 1, "common")
        await create_creature(session, 2, "rare")
        await create_creature(session, 3, "epic", region_locked=True, allowed_countries=["JP"])
        await create_creature(session, 4, "uncommon", region_locked=True, allowed_countries=["US", "CA"])

    async def test_unknown_country_gets_only_global(self, session, catalog):
        creatures = await get_eligible_creature_types(session, None)
        assert {c.id for c in creatures} == {1, 2}

    async def test_country_unlocks_its_regionals(self, session, catalog):
        creatures = await get_eligible_creature_types(session, "JP")
        assert {c.id for c in creatures} == {1, 2, 3}

    async def test_country_code_case_insensitive(self, session, catalog):
        creatures = await get_eligible_creature_types(session, "ca")
        assert {c.id for c in creatures} == {1, 2, 4}

    async def test_country_without_regionals(self, session, catalog):
        creatures = await get_eligible_creature_types(session, "FR")
        assert {c.id for c in creatures} == {1, 2}


class TestNearbySpawns:
    async def test_sorted_nearest_first_within_radius(self, session, session_factory):
        await create_creature(session, 1)
        far = await create_spawn(session, 1, meters_north(0, 400))
        near = await create_spawn(session, 1, meters_north(0, 30))
        mid = await create_spawn(session, 1, meters_north(0, 120))
        await create_spawn(session, 1, meters_north(0, 700))

        async with session_factory() as fresh:
            spawns = await get_nearby_spawns(fresh, 0, 0, 500)

        assert [s.id for s in spawns] == [near.id, mid.id, far.id]
        assert spawns[0].creature_type.id == 1

    async def test_excludes_expired(self, session):
        await create_creature(session, 1)
        live = await create_spawn(session, 1, meters_north(0, 50))
        await create_spawn(session, 1, meters_north(0, 60), expires_in=timedelta(seconds=-1))

        spawns = await get_nearby_spawns(session, 0, 0, 500)

        assert [s.id for s in spawns] == [live.id]

    async def test_excludes_gym_spawns(self, session):
        await create_creature(session, 1)
        gym = await create_gym(session, meters_north(0, 40), 0)
        await create_spawn(session, 1, gym.latitude, gym.longitude, gym_id=gym.id)
        ambient = await create_spawn(session, 1, meters_north(0, 80))

        spawns = await get_nearby_spawns(session, 0, 0, 500)

        assert [s.id for s in spawns] == [ambient.id]

    async def test_capped_by_limit(self, session):
        await create_creature(session, 1)
        for i in range(8):
            await create_spawn(session, 1, meters_north(0, 10 + i * 10))

        spawns = await get_nearby_spawns(session, 0, 0, 500, limit=5)

        assert len(spawns) == 5
        distances = [distance_meters(0, 0, s.latitude, s.longitude) for s in spawns]
        assert distances == sorted(distances)
        assert distances[-1] == pytest.approx(50)

    async def test_default_limit_is_fifty(self, session, commons):
        user = await create_user(session)
        for seed in range(3):
            await generate_spawns(session, user.telegram_id, 0, 0, 500, grid=always_grid(seed))

        spawns = await get_nearby_spawns(session, 0, 0, 500)

        assert len(spawns) == 50

    async def test_invalid_coordinates_rejected(self, session):
        with pytest.raises(InvalidCoordinateError):
            await get_nearby_spawns(session, 0, 200, 500)

    @pytest.mark.parametrize("radius", [float("nan"), float("inf"), -10.0, 0])
    async def test_bad_radius_rejected(self, session, radius):
        with pytest.raises(ValueError):
            await get_nearby_spawns(session, 0, 0, radius)


async def test_cleanup_removes_only_expired(session):
    await create_creature(session, 1)
    live = await create_spawn(session, 1)
    await create_spawn(session, 1, expires_in=timedelta(seconds=-1))
    await create_spawn(session, 1, expires_in=timedelta(minutes=-30))

    removed = await cleanup_expired_spawns(session)

    assert removed == 2
    result = await session.execute(select(Spawn.id))
    assert result.scalars().all() == [live.id]
