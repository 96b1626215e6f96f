"""
Local Marketplace Backend - User Service
=========================================

What:  Registration, login, profile maintenance and last-known location
       for marketplace accounts.
Who:   Called by the user and auth route handlers.

Credential Handling:
    Passwords are hashed with passlib before they touch the database and
    verified against the stored hash on login. A stored hash that passlib
    flags as outdated is transparently upgraded on the next good login.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from marketplace.models.listing import Listing
from marketplace.models.message import Message
from marketplace.models.user import User
from marketplace.schemas.user import ProfileUpdateRequest
from marketplace.security import hash_password, verify_and_update
from marketplace.services.geo import Coordinate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic layer for user accounts.

    Responsibilities:
        - register() / authenticate(): account creation and login
        - get() / get_by_email() / list_users(): lookups
        - update_profile() / save_user_location(): mutations
        - delete(): account removal with its listings and messages
    """

    NULLABLE_PROFILE_FIELDS = frozenset({"profile_image_url"})

    async def list_users(self, db: AsyncSession) -> List[User]:
        try:
            result = await db.execute(select(User).order_by(User.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e))
            raise DatabaseError(message="Could not retrieve users. Please try again.")

    async def get(self, db: AsyncSession, user_id: int) -> User:
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """Case-insensitive lookup by login email; None when no account matches."""
        try:
            result = await db.execute(
                select(User).where(User.email == self._normalize_email(email))
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user by email: %s", str(e))
            raise DatabaseError()

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
    ) -> User:
        """
        Create an account.

        Raises:
            ConflictError: another account already uses this email
        """
        email = self._normalize_email(email)
        if await self.get_by_email(db, email) is not None:
            raise ConflictError(
                message="A user with this email already exists.",
                context={"field": "email"},
            )

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            phone_number="",
            average_rating=0.0,
            created_at=datetime.now(timezone.utc),
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError(
                message="A user with this email already exists.",
                context={"field": "email"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not create the account. Please try again.")

        logger.info("User %s registered", user.id)
        return user

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Verify credentials and return the account.

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        user = await self.get_by_email(db, email)
        if user is None:
            raise AuthenticationError(
                message="User not found. Please check your email and try again."
            )

        valid, new_hash = verify_and_update(password, user.password_hash)
        if not valid:
            logger.warning("Failed login for user %s", user.id)
            raise AuthenticationError()

        if new_hash:
            user.password_hash = new_hash
            try:
                await db.flush()
            except SQLAlchemyError as e:
                logger.error("Database error upgrading hash for user %s: %s", user.id, str(e))
                raise DatabaseError(context={"user_id": user.id})
        return user

    async def update_profile(
        self, db: AsyncSession, user_id: int, data: ProfileUpdateRequest
    ) -> User:
        """
        Apply the fields present in `data`; omitted fields are left alone.

        An explicit null clears a nullable field (profile_image_url) and is
        ignored for the required ones.
        """
        user = await self.get(db, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in self.NULLABLE_PROFILE_FIELDS:
                continue
            setattr(user, field, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})
        return user

    async def save_user_location(
        self, db: AsyncSession, user_id: int, coordinate: Coordinate
    ) -> User:
        """Persist the user's last known coordinate."""
        user = await self.get(db, user_id)
        user.latitude = coordinate.latitude
        user.longitude = coordinate.longitude
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving location for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})
        return user

    async def delete(self, db: AsyncSession, user_id: int) -> None:
        """
        Remove an account together with its messages and listings.

        Messages from other users about the removed listings are kept and
        detached from the listing.
        """
        user = await self.get(db, user_id)
        try:
            listing_ids = select(Listing.id).where(Listing.seller_id == user_id)
            await db.execute(
                delete(Message)
                .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                update(Message)
                .where(Message.listing_id.in_(listing_ids))
                .values(listing_id=None)
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Listing)
                .where(Listing.seller_id == user_id)
                .execution_options(synchronize_session=False)
            )
            await db.delete(user)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})
        logger.info("User %s deleted", user_id)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
