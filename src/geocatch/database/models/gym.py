"""Gym and gym presence models."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from geocatch.core.clock import utcnow
from geocatch.database.models.base import Base, TimestampMixin


class Gym(Base, TimestampMixin):
    """A fixed real-world location that can host quorum-gated spawns."""

    __tablename__ = "gyms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Gym {self.id} {self.name}>"


class GymPresence(Base):
    """A player's last known position near a gym. Liveness signal only."""

    __tablename__ = "gym_presences"

    gym_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("gyms.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.telegram_id", ondelete="CASCADE"),
        primary_key=True,
    )

    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<GymPresence gym={self.gym_id} user={self.user_id}>"
