"""Catch model - permanent record of a successful catch."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Float, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geocatch.core.clock import utcnow
from geocatch.database.models.base import Base


class Catch(Base):
    """A creature caught by a user. Never mutated after insert."""

    __tablename__ = "catches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.telegram_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    creature_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("creature_types.id"),
        nullable=False,
        index=True,
    )

    # Where the player stood when catching
    catch_latitude: Mapped[float] = mapped_column(Float, nullable=False)
    catch_longitude: Mapped[float] = mapped_column(Float, nullable=False)

    cp_level: Mapped[int] = mapped_column(Integer, nullable=False)

    caught_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationships
    user = relationship("User", back_populates="catches")
    creature_type = relationship("CreatureType", lazy="joined")

    def __repr__(self) -> str:
        return f"<Catch {self.id} user={self.user_id} type={self.creature_type_id} CP{self.cp_level}>"
