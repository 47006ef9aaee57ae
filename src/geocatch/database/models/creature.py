"""Creature type model - static catalog data."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geocatch.database.models.base import Base


class Rarity(str, Enum):
    """Rarity tiers, lowest to highest."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class CreatureType(Base):
    """Static data for a creature species. Seeded out of band."""

    __tablename__ = "creature_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    rarity: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Region locking
    region_locked: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    allowed_countries: Mapped[list] = mapped_column(JSON, default=list)

    base_spawn_weight: Mapped[float] = mapped_column(Float, default=1.0)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sprite_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CreatureType #{self.id} {self.name} ({self.rarity})>"

    def is_available_in(self, country_code: str | None) -> bool:
        """Check whether this creature may spawn in the given country."""
        if not self.region_locked:
            return True
        if not country_code:
            return False
        return country_code.upper() in {c.upper() for c in self.allowed_countries or []}
