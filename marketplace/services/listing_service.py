"""
Local Marketplace Backend - Listing Service
============================================

What:  The listing store: browse, filter, CRUD and proximity search over
       the `listings` table.
Who:   Called by the listing and user route handlers.
How:   Stateless methods that receive an AsyncSession per call; the
       session dependency owns commit/rollback.

Proximity Search Flow (GET /api/listings/nearby):
    ┌──────────────┐    ┌───────────────┐    ┌──────────────────────┐
    │ list_active  │───▶│  candidates   │───▶│ find_within_radius   │
    │  (SQL)       │    │ newest first  │    │ (haversine, in-mem)  │
    └──────────────┘    └───────────────┘    └──────────────────────┘

    The result keeps the store's ordering, so nearby results read
    newest-first like the browse view.

Error Handling Strategy:
    Missing rows become NotFoundError. Business-rule violations become
    ValidationError. SQLAlchemy failures are logged and wrapped in
    DatabaseError so no SQL detail reaches the client.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.exceptions import DatabaseError, NotFoundError, ValidationError
from marketplace.models.listing import Listing
from marketplace.models.message import Message
from marketplace.models.user import User
from marketplace.schemas.listing import ListingWrite
from marketplace.services.geo import Coordinate, find_within_radius

logger = logging.getLogger(__name__)


class ListingService:
    """
    Business logic layer for listings.

    Responsibilities:
        - list_active() / list_by_category() / list_by_seller(): browse queries
        - get() / create() / replace(): single-record access and writes
        - deactivate() / delete(): soft and hard removal
        - find_nearby(): radius search over the active listings
    """

    @staticmethod
    def _browse_query():
        # listed_at DESC with id as a tie-breaker keeps ordering stable
        return select(Listing).order_by(desc(Listing.listed_at), desc(Listing.id))

    async def list_active(self, db: AsyncSession) -> List[Listing]:
        """All active listings, newest first."""
        try:
            result = await db.execute(
                self._browse_query().where(Listing.is_active.is_(True))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing active listings: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve listings. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def list_by_category(
        self, db: AsyncSession, category: Optional[str]
    ) -> List[Listing]:
        """
        Active listings in `category`, newest first.

        A blank category means "no filter" and returns every active listing.
        """
        if not category:
            return await self.list_active(db)

        try:
            result = await db.execute(
                self._browse_query().where(
                    Listing.is_active.is_(True),
                    Listing.category == category,
                )
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error filtering by category %r: %s", category, str(e))
            raise DatabaseError(
                message="Could not retrieve listings. Please try again.",
                context={"category": category},
            )

    async def list_by_seller(self, db: AsyncSession, seller_id: int) -> List[Listing]:
        """Every listing of a seller, including deactivated ones, newest first."""
        try:
            result = await db.execute(
                self._browse_query().where(Listing.seller_id == seller_id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing seller %s listings: %s", seller_id, str(e))
            raise DatabaseError(
                message="Could not retrieve listings. Please try again.",
                context={"seller_id": seller_id},
            )

    async def get(self, db: AsyncSession, listing_id: int) -> Listing:
        try:
            listing = await db.get(Listing, listing_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching listing %s: %s", listing_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the listing. Please try again.",
                context={"listing_id": listing_id},
            )
        if listing is None:
            raise NotFoundError(resource="listing", resource_id=listing_id)
        return listing

    async def create(self, db: AsyncSession, data: ListingWrite) -> Listing:
        """
        Create a new active listing stamped with the current time.

        Raises:
            ValidationError: blank title or non-positive price
            NotFoundError: seller_id does not reference an existing user
        """
        self._validate(data)
        await self._ensure_seller(db, data.seller_id)

        listing = Listing(
            **data.model_dump(),
            listed_at=datetime.now(timezone.utc),
            is_active=True,
        )
        try:
            db.add(listing)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating listing: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the listing. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.info("Listing %s created by seller %s", listing.id, listing.seller_id)
        return listing

    async def replace(
        self, db: AsyncSession, listing_id: int, data: ListingWrite
    ) -> Listing:
        """
        Full-record replace of a listing's editable fields.

        id, listed_at and is_active are not part of the write model and keep
        their stored values.
        """
        self._validate(data)
        listing = await self.get(db, listing_id)
        if data.seller_id != listing.seller_id:
            await self._ensure_seller(db, data.seller_id)

        for field, value in data.model_dump().items():
            setattr(listing, field, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating listing %s: %s", listing_id, str(e))
            raise DatabaseError(
                message="Could not save the listing. Please try again.",
                context={"listing_id": listing_id},
            )
        return listing

    async def deactivate(self, db: AsyncSession, listing_id: int) -> Listing:
        """Soft delete: the listing stays in the table but leaves browse and search."""
        listing = await self.get(db, listing_id)
        listing.is_active = False
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deactivating listing %s: %s", listing_id, str(e))
            raise DatabaseError(context={"listing_id": listing_id})
        logger.info("Listing %s deactivated", listing_id)
        return listing

    async def delete(self, db: AsyncSession, listing_id: int) -> None:
        """Hard delete. Messages about the listing are kept, detached from it."""
        listing = await self.get(db, listing_id)
        try:
            await db.execute(
                update(Message)
                .where(Message.listing_id == listing_id)
                .values(listing_id=None)
                .execution_options(synchronize_session=False)
            )
            await db.delete(listing)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting listing %s: %s", listing_id, str(e))
            raise DatabaseError(context={"listing_id": listing_id})
        logger.info("Listing %s deleted", listing_id)

    async def find_nearby(
        self, db: AsyncSession, center: Coordinate, radius_km: float
    ) -> List[Listing]:
        """Active listings within `radius_km` of `center`, newest first."""
        candidates = await self.list_active(db)
        nearby = find_within_radius(center, radius_km, candidates)
        logger.debug(
            "Nearby search at (%.4f, %.4f) r=%.1fkm: %d of %d listings",
            center.latitude,
            center.longitude,
            radius_km,
            len(nearby),
            len(candidates),
        )
        return nearby

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _validate(data: ListingWrite) -> None:
        if not data.title or not data.title.strip():
            raise ValidationError(message="A listing needs a title", field="title")
        if data.price <= 0:
            raise ValidationError(
                message="A listing needs a price greater than zero",
                field="price",
            )

    @staticmethod
    async def _ensure_seller(db: AsyncSession, seller_id: int) -> None:
        try:
            seller = await db.get(User, seller_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", seller_id, str(e))
            raise DatabaseError(context={"user_id": seller_id})
        if seller is None:
            raise NotFoundError(resource="user", resource_id=seller_id)


# ── Singleton Instance ────────────────────────────────────────────────────
listing_service = ListingService()
