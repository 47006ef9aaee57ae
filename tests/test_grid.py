"""Tests for grid-based spawn placement."""

import random
from dataclasses import dataclass

import pytest

from geocatch.core.exceptions import InvalidCoordinateError
from geocatch.core.geo import distance_meters
from geocatch.core.spawning.grid import GridConfig, SpawnGrid
from geocatch.core.spawning.rarity import RaritySelector


@dataclass(frozen=True)
class Creature:
    id: int
    rarity: str


CREATURES = [Creature(1, "common"), Creature(2, "uncommon"), Creature(3, "rare")]

ALWAYS = GridConfig(cell_probability=1.0)
NEVER = GridConfig(cell_probability=0.0)


def make_grid(config: GridConfig, seed: int = 42) -> SpawnGrid:
    rng = random.Random(seed)
    return SpawnGrid(config=config, selector=RaritySelector(rng=rng), rng=rng)


@pytest.mark.parametrize("lat,lon", [(0, 0), (51.5074, -0.1278), (-33.86, 151.21), (64.1, -21.9)])
def test_every_candidate_inside_ring(lat, lon):
    candidates = make_grid(ALWAYS).generate(lat, lon, CREATURES)

    assert candidates
    for candidate in candidates:
        distance = distance_meters(lat, lon, candidate.latitude, candidate.longitude)
        assert 25 <= distance <= 150
        assert candidate.distance == pytest.approx(distance)


def test_full_probability_fills_every_ring_cell():
    # 50m lattice points with 1 <= i^2 + j^2 <= 9
    grid = make_grid(ALWAYS)

    assert len(grid.points(0, 0)) == 28
    assert len(grid.generate(0, 0, CREATURES)) == 28


def test_zero_probability_emits_nothing():
    assert make_grid(NEVER).generate(0, 0, CREATURES) == []


def test_no_creatures_emits_nothing():
    assert make_grid(ALWAYS).generate(0, 0, []) == []


def test_caller_radius_caps_distance():
    candidates = make_grid(ALWAYS).generate(10, 10, CREATURES, max_distance=80)

    assert candidates
    assert all(c.distance <= 80 for c in candidates)


def test_caller_radius_cannot_exceed_grid_max():
    candidates = make_grid(ALWAYS).generate(10, 10, CREATURES, max_distance=5000)

    assert max(c.distance for c in candidates) <= 150


def test_spawn_count_is_random_per_cell():
    grid = make_grid(GridConfig(cell_probability=0.25), seed=1)
    counts = [len(grid.generate(0, 0, CREATURES)) for _ in range(2000)]

    assert min(counts) < max(counts)
    assert sum(counts) / len(counts) == pytest.approx(28 * 0.25, abs=0.5)


def test_park_boost_probability():
    config = GridConfig(cell_probability=0.25, park_multiplier=2.5)

    assert config.probability(False) == 0.25
    assert config.probability(True) == pytest.approx(0.625)
    assert GridConfig(cell_probability=0.5, park_multiplier=3).probability(True) == 1.0


def test_park_flag_is_carried_on_candidates():
    candidates = make_grid(ALWAYS).generate(0, 0, CREATURES, in_park=True)

    assert all(c.in_park for c in candidates)


def test_invalid_origin_rejected():
    with pytest.raises(InvalidCoordinateError):
        make_grid(ALWAYS).generate(float("nan"), 0, CREATURES)


def test_antimeridian_wraps_longitude():
    candidates = make_grid(ALWAYS).generate(0, 179.9995, CREATURES)

    assert candidates
    assert all(-180 <= c.longitude <= 180 for c in candidates)
    for candidate in candidates:
        distance = distance_meters(0, 179.9995, candidate.latitude, candidate.longitude)
        assert 25 <= distance <= 150
