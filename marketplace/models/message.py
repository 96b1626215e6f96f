"""
Local Marketplace Backend - Message SQLAlchemy Model
=====================================================

What:  ORM model representing the `messages` table.

Lifecycle:
    Created unread with a server-assigned sent_at. The only mutation
    afterwards is flipping is_read.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.database import Base, UTCDateTime


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # Optional: a message may be about a specific listing
    listing_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    attachment_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    sent_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_messages_participants", "sender_id", "receiver_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(id={self.id}, {self.sender_id}->{self.receiver_id}, "
            f"read={self.is_read})>"
        )
