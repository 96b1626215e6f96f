"""
Local Marketplace Backend - User SQLAlchemy Model
==================================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for registration, login and profile updates.

Table Design Rationale:
    - Integer autoincrement primary key: listings and messages reference
      users by this id, never by embedded objects
    - email: unique, used as the login key
    - password_hash: passlib hash string; the plain password is never stored
    - average_rating: stored as given by the caller, never aggregated here
    - latitude/longitude: last known location, NULL until the first update
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.database import Base, UTCDateTime
from marketplace.services.geo import Coordinate


class User(Base):
    """A registered marketplace account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(50), nullable=False)

    email: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Login key; unique across accounts",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="passlib hash (pbkdf2_sha256); never the plain secret",
    )

    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    profile_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
