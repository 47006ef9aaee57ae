"""User model for players."""

from datetime import datetime

from sqlalchemy import BigInteger, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geocatch.database.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Represents a Telegram user playing the game."""

    __tablename__ = "users"

    # Primary key is Telegram user ID
    telegram_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    # User info
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # ISO 3166-1 alpha-2 code used for region-locked creatures
    country_code: Mapped[str | None] = mapped_column(String(2), nullable=True)

    # Last reported position
    last_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_location_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Stats
    total_catches: Mapped[int] = mapped_column(Integer, default=0)

    # Relationships
    catches = relationship("Catch", back_populates="user", lazy="dynamic")

    def __repr__(self) -> str:
        return f"<User {self.telegram_id} @{self.username}>"

    @property
    def display_name(self) -> str:
        """Get display name for user."""
        if self.username:
            return f"@{self.username}"
        if self.first_name:
            return self.first_name
        return f"User {self.telegram_id}"

    @property
    def has_location(self) -> bool:
        return self.last_latitude is not None and self.last_longitude is not None
