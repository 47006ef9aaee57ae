"""Grid-based candidate spawn placement around a player."""

import math
import random
from dataclasses import dataclass
from typing import Any

from geocatch.config import settings
from geocatch.core.geo import distance_meters, offset_coordinate, validate_coordinate
from geocatch.core.spawning.rarity import RaritySelector


@dataclass(frozen=True)
class GridConfig:
    """Geometry and odds for one grid pass."""

    min_distance: float = 25.0
    max_distance: float = 150.0
    spacing: float = 50.0
    cell_probability: float = 0.25
    park_multiplier: float = 2.5

    @classmethod
    def from_settings(cls) -> "GridConfig":
        return cls(
            min_distance=settings.spawn_min_distance_meters,
            max_distance=settings.spawn_max_distance_meters,
            spacing=settings.spawn_grid_spacing_meters,
            cell_probability=settings.spawn_cell_probability,
            park_multiplier=settings.park_spawn_multiplier,
        )

    def probability(self, in_park: bool) -> float:
        """Per-cell spawn probability, capped at 1."""
        if in_park:
            return min(1.0, self.cell_probability * self.park_multiplier)
        return self.cell_probability


@dataclass(frozen=True)
class SpawnCandidate:
    """A creature placed at a point, not yet persisted."""

    creature: Any
    latitude: float
    longitude: float
    distance: float
    in_park: bool = False


class SpawnGrid:
    """Lay a square grid around an origin and roll each cell for a spawn.

    Every cell is an independent Bernoulli trial, so a pass may produce any
    number of spawns including zero. Cells outside the
    [min_distance, max_distance] ring are never emitted.
    """

    def __init__(
        self,
        config: GridConfig | None = None,
        selector: RaritySelector | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GridConfig.from_settings()
        self.rng = rng or random.Random()
        self.selector = selector or RaritySelector(rng=self.rng)

    def points(
        self,
        lat: float,
        lon: float,
        max_distance: float | None = None,
    ) -> list[tuple[float, float, float]]:
        """Get (lat, lon, distance) for every grid point inside the ring."""
        validate_coordinate(lat, lon)

        outer = self.config.max_distance
        if max_distance is not None:
            outer = min(outer, max_distance)

        steps = math.ceil(outer / self.config.spacing)
        points = []
        for i in range(-steps, steps + 1):
            for j in range(-steps, steps + 1):
                p_lat, p_lon = offset_coordinate(
                    lat, lon, j * self.config.spacing, i * self.config.spacing
                )
                if not -90 <= p_lat <= 90:
                    continue
                # Normalize across the antimeridian
                p_lon = (p_lon + 180) % 360 - 180
                distance = distance_meters(lat, lon, p_lat, p_lon)
                if self.config.min_distance <= distance <= outer:
                    points.append((p_lat, p_lon, distance))
        return points

    def generate(
        self,
        lat: float,
        lon: float,
        creatures: list,
        in_park: bool = False,
        max_distance: float | None = None,
    ) -> list[SpawnCandidate]:
        """Roll every cell and pick a creature for each success."""
        if not creatures:
            return []

        probability = self.config.probability(in_park)
        candidates = []
        for p_lat, p_lon, distance in self.points(lat, lon, max_distance):
            if self.rng.random() >= probability:
                continue
            creature = self.selector.select(creatures, boosted=in_park)
            if creature is None:
                continue
            candidates.append(
                SpawnCandidate(
                    creature=creature,
                    latitude=p_lat,
                    longitude=p_lon,
                    distance=distance,
                    in_park=in_park,
                )
            )
        return candidates
