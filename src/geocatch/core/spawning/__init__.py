"""Spawning package."""

from geocatch.core.spawning.engine import (
    cleanup_expired_spawns,
    generate_spawns,
    get_eligible_creature_types,
    get_nearby_spawns,
    spawn_expiry,
)
from geocatch.core.spawning.grid import GridConfig, SpawnCandidate, SpawnGrid
from geocatch.core.spawning.rarity import RaritySelector

__all__ = [
    "generate_spawns",
    "get_nearby_spawns",
    "get_eligible_creature_types",
    "cleanup_expired_spawns",
    "spawn_expiry",
    "GridConfig",
    "SpawnCandidate",
    "SpawnGrid",
    "RaritySelector",
]
