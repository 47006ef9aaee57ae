"""Spawn model for live, geolocated creature instances."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geocatch.core.clock import utcnow
from geocatch.database.models.base import Base


class Spawn(Base):
    """An ephemeral creature at a location. Deleted when caught or swept."""

    __tablename__ = "spawns"
    __table_args__ = (
        Index("ix_spawns_lat_lon", "latitude", "longitude"),
        # At most one gym-bound spawn row per gym; NULL gym_id is unrestricted
        Index("uq_spawns_gym_id", "gym_id", unique=True),
    )

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    creature_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("creature_types.id"),
        nullable=False,
    )

    # Location
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    # Timing
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(nullable=False, index=True)

    # Gym-bound spawns are only surfaced through the gym feed
    gym_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("gyms.id", ondelete="CASCADE"),
        nullable=True,
    )

    # Boost context at creation time
    in_park: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    creature_type = relationship("CreatureType", lazy="joined")

    def __repr__(self) -> str:
        return f"<Spawn {self.id} type={self.creature_type_id} at ({self.latitude}, {self.longitude})>"

    @property
    def is_gym_spawn(self) -> bool:
        return self.gym_id is not None

    def is_live(self, now: datetime | None = None) -> bool:
        """Check if spawn has not expired yet."""
        return (now or utcnow()) < self.expires_at
