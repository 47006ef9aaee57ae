"""Database models package."""

from geocatch.database.models.base import Base, TimestampMixin
from geocatch.database.models.catch import Catch
from geocatch.database.models.creature import CreatureType, Rarity
from geocatch.database.models.gym import Gym, GymPresence
from geocatch.database.models.spawn import Spawn
from geocatch.database.models.user import User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Core
    "User",
    # Static data
    "CreatureType",
    "Rarity",
    "Gym",
    # Game state
    "Spawn",
    "Catch",
    "GymPresence",
]
