"""
Local Marketplace Backend - Message Service
============================================

What:  Direct messages between users, optionally tied to a listing.
Who:   Called by the message route handlers.

Ordering:
    Conversations and per-listing threads are returned oldest first
    (sent_at ASC), the order a chat view renders them.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, asc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.exceptions import DatabaseError, NotFoundError, ValidationError
from marketplace.models.listing import Listing
from marketplace.models.message import Message
from marketplace.models.user import User

logger = logging.getLogger(__name__)


class MessageService:

    async def send(
        self,
        db: AsyncSession,
        sender_id: int,
        receiver_id: int,
        content: str,
        listing_id: Optional[int] = None,
        attachment_url: Optional[str] = None,
    ) -> Message:
        """
        Store a new unread message with a server-assigned timestamp.

        Raises:
            ValidationError: blank content
            NotFoundError: unknown sender, receiver or listing
        """
        if not content or not content.strip():
            raise ValidationError(message="A message cannot be empty", field="content")

        await self._ensure_exists(db, User, sender_id, "user")
        await self._ensure_exists(db, User, receiver_id, "user")
        if listing_id is not None:
            await self._ensure_exists(db, Listing, listing_id, "listing")

        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            listing_id=listing_id,
            content=content,
            attachment_url=attachment_url,
            sent_at=datetime.now(timezone.utc),
            is_read=False,
        )
        try:
            db.add(message)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error sending message: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not send the message. Please try again.")
        logger.info("Message %s sent %s -> %s", message.id, sender_id, receiver_id)
        return message

    async def conversation(
        self, db: AsyncSession, user_a: int, user_b: int
    ) -> List[Message]:
        """Messages exchanged between two users in either direction, oldest first."""
        query = (
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                    and_(Message.sender_id == user_b, Message.receiver_id == user_a),
                )
            )
            .order_by(asc(Message.sent_at), asc(Message.id))
        )
        return await self._fetch_all(db, query)

    async def for_listing(self, db: AsyncSession, listing_id: int) -> List[Message]:
        query = (
            select(Message)
            .where(Message.listing_id == listing_id)
            .order_by(asc(Message.sent_at), asc(Message.id))
        )
        return await self._fetch_all(db, query)

    async def get(self, db: AsyncSession, message_id: int) -> Message:
        try:
            message = await db.get(Message, message_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching message %s: %s", message_id, str(e))
            raise DatabaseError(context={"message_id": message_id})
        if message is None:
            raise NotFoundError(resource="message", resource_id=message_id)
        return message

    async def mark_read(self, db: AsyncSession, message_id: int) -> Message:
        """Flip is_read; the only mutation a stored message allows."""
        message = await self.get(db, message_id)
        if not message.is_read:
            message.is_read = True
            try:
                await db.flush()
            except SQLAlchemyError as e:
                logger.error("Database error marking message %s read: %s", message_id, str(e))
                raise DatabaseError(context={"message_id": message_id})
        return message

    async def delete(self, db: AsyncSession, message_id: int) -> None:
        message = await self.get(db, message_id)
        try:
            await db.delete(message)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting message %s: %s", message_id, str(e))
            raise DatabaseError(context={"message_id": message_id})

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    async def _fetch_all(db: AsyncSession, query) -> List[Message]:
        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing messages: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve messages. Please try again.")

    @staticmethod
    async def _ensure_exists(db: AsyncSession, model, pk: int, resource: str) -> None:
        try:
            found = await db.get(model, pk)
        except SQLAlchemyError as e:
            logger.error("Database error fetching %s %s: %s", resource, pk, str(e))
            raise DatabaseError(context={f"{resource}_id": pk})
        if found is None:
            raise NotFoundError(resource=resource, resource_id=pk)


# ── Singleton Instance ────────────────────────────────────────────────────
message_service = MessageService()
