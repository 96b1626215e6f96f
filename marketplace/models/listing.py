"""
Local Marketplace Backend - Listing SQLAlchemy Model
=====================================================

What:  ORM model representing the `listings` table (items for sale).
Who:   Used by ListingService for CRUD and as the candidate type for
       proximity search (via the `coordinate` property).

Lifecycle:
    1. Created with is_active=True and listed_at=now
    2. Updated by full-record replace of the editable fields
    3. Soft-deleted by clearing is_active (hidden from browse and search)
    4. Hard delete removes the row entirely

Query Patterns:
    - Browse: WHERE is_active ORDER BY listed_at DESC
      → idx_listings_active_listed_at
    - By category: WHERE is_active AND category = :c ORDER BY listed_at DESC
    - By seller: WHERE seller_id = :id ORDER BY listed_at DESC
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.database import Base, UTCDateTime
from marketplace.services.geo import Coordinate


class Listing(Base):
    """An item offered for sale by a user."""

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    seller_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Numeric, not Float: prices are money and must round-trip exactly
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    category: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)

    condition: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    # Ordered list of image URLs; stored as a JSON array
    image_urls: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    location: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        comment="Free-text location label, e.g. 'San Francisco, CA'",
    )

    listed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("idx_listings_active_listed_at", "is_active", listed_at.desc()),
    )

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def __repr__(self) -> str:
        return (
            f"<Listing(id={self.id}, title='{self.title}', "
            f"active={self.is_active})>"
        )
