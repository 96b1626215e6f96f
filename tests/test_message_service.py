"""
Local Marketplace Backend - Message Service Tests
==================================================
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from marketplace.exceptions import DatabaseError, NotFoundError, ValidationError
from marketplace.services.message_service import MessageService


class TestSendMessage:

    def setup_method(self):
        self.service = MessageService()

    @pytest.mark.asyncio
    async def test_send_creates_unread_message(self, db_session, seller, buyer, make_listing):
        listing = await make_listing()

        message = await self.service.send(
            db_session,
            sender_id=buyer.id,
            receiver_id=seller.id,
            content="Is this still available?",
            listing_id=listing.id,
        )

        assert message.id is not None
        assert message.is_read is False
        assert message.sent_at is not None
        assert message.listing_id == listing.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "  \n"])
    async def test_blank_content_rejected(self, db_session, seller, buyer, content):
        with pytest.raises(ValidationError):
            await self.service.send(db_session, buyer.id, seller.id, content)

    @pytest.mark.asyncio
    async def test_unknown_receiver(self, db_session, buyer):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.send(db_session, buyer.id, 999, "Hello")
        assert exc_info.value.context["resource"] == "user"

    @pytest.mark.asyncio
    async def test_unknown_listing(self, db_session, seller, buyer):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.send(db_session, buyer.id, seller.id, "Hello", listing_id=55)
        assert exc_info.value.context["resource"] == "listing"


class TestThreads:

    def setup_method(self):
        self.service = MessageService()

    @pytest.mark.asyncio
    async def test_conversation_both_directions_oldest_first(self, db_session, seller, buyer):
        first = await self.service.send(db_session, buyer.id, seller.id, "Hi")
        second = await self.service.send(db_session, seller.id, buyer.id, "Hello!")
        third = await self.service.send(db_session, buyer.id, seller.id, "Still for sale?")

        forward = await self.service.conversation(db_session, seller.id, buyer.id)
        backward = await self.service.conversation(db_session, buyer.id, seller.id)

        assert [m.id for m in forward] == [first.id, second.id, third.id]
        assert [m.id for m in backward] == [m.id for m in forward]

    @pytest.mark.asyncio
    async def test_for_listing(self, db_session, seller, buyer, make_listing):
        listing = await make_listing()
        about = await self.service.send(db_session, buyer.id, seller.id, "Price?", listing_id=listing.id)
        await self.service.send(db_session, buyer.id, seller.id, "Unrelated")

        result = await self.service.for_listing(db_session, listing.id)

        assert [m.id for m in result] == [about.id]

    @pytest.mark.asyncio
    async def test_mark_read(self, db_session, seller, buyer):
        message = await self.service.send(db_session, buyer.id, seller.id, "Hi")

        updated = await self.service.mark_read(db_session, message.id)

        assert updated.is_read is True
        # Idempotent
        assert (await self.service.mark_read(db_session, message.id)).is_read is True

    @pytest.mark.asyncio
    async def test_delete(self, db_session, seller, buyer):
        message = await self.service.send(db_session, buyer.id, seller.id, "Oops")

        await self.service.delete(db_session, message.id)

        with pytest.raises(NotFoundError):
            await self.service.get(db_session, message.id)

    @pytest.mark.asyncio
    async def test_conversation_wraps_database_errors(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("timeout")

        with pytest.raises(DatabaseError):
            await self.service.conversation(mock_db_session, 1, 2)
