"""
Local Marketplace Backend - User Service Tests
===============================================

What we test:
    ✅ Registration hashes the password and rejects duplicate emails
    ✅ Login succeeds with the right password, fails otherwise
    ✅ Partial profile updates and saved locations
    ✅ Account deletion removes listings and messages
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from marketplace.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from marketplace.models.listing import Listing
from marketplace.models.message import Message
from marketplace.schemas.user import ProfileUpdateRequest
from marketplace.security import verify_password
from marketplace.services.geo import Coordinate
from marketplace.services.user_service import UserService


class TestRegistrationAndLogin:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(self, db_session):
        user = await self.service.register(
            db_session, username="alice", email="Alice@Example.com", password="hunter22"
        )

        assert user.id is not None
        assert user.email == "alice@example.com"
        assert user.password_hash != "hunter22"
        assert verify_password("hunter22", user.password_hash)
        assert user.average_rating == 0.0
        assert user.coordinate is None

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, db_session, seller):
        with pytest.raises(ConflictError):
            await self.service.register(
                db_session, username="other", email="JOHN@example.com", password="x"
            )

    @pytest.mark.asyncio
    async def test_authenticate_success(self, db_session, seller):
        user = await self.service.authenticate(db_session, "john@example.com", "secret-1")
        assert user.id == seller.id

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, db_session, seller):
        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.authenticate(db_session, "john@example.com", "wrong")
        assert exc_info.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email(self, db_session):
        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.authenticate(db_session, "nobody@example.com", "secret")
        assert "User not found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_hash_upgrade_failure_is_database_error(self, mock_db_session):
        user = MagicMock(id=7, password_hash="old-hash")
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        mock_db_session.execute.return_value = result
        mock_db_session.flush.side_effect = SQLAlchemyError("database is locked")

        with patch(
            "marketplace.services.user_service.verify_and_update",
            return_value=(True, "new-hash"),
        ):
            with pytest.raises(DatabaseError) as exc_info:
                await self.service.authenticate(mock_db_session, "john@example.com", "pw")

        assert exc_info.value.context == {"user_id": 7}

    @pytest.mark.asyncio
    async def test_get_by_email_missing_returns_none(self, db_session):
        assert await self.service.get_by_email(db_session, "ghost@example.com") is None


class TestProfile:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_update_profile_only_touches_sent_fields(self, db_session, seller):
        user = await self.service.update_profile(
            db_session, seller.id, ProfileUpdateRequest(phone_number="555-000-0000")
        )

        assert user.phone_number == "555-000-0000"
        assert user.username == "johndoe"
        assert user.average_rating == 4.5

    @pytest.mark.asyncio
    async def test_explicit_null_clears_profile_image(self, db_session, seller):
        await self.service.update_profile(
            db_session, seller.id, ProfileUpdateRequest(profile_image_url="https://example.com/me.jpg")
        )

        user = await self.service.update_profile(
            db_session, seller.id, ProfileUpdateRequest(profile_image_url=None, username=None)
        )

        assert user.profile_image_url is None
        assert user.username == "johndoe"

    @pytest.mark.asyncio
    async def test_update_missing_user(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_profile(db_session, 77, ProfileUpdateRequest(username="x"))

    @pytest.mark.asyncio
    async def test_save_user_location(self, db_session, seller):
        user = await self.service.save_user_location(
            db_session, seller.id, Coordinate(47.6062, -122.3321)
        )
        assert user.coordinate == Coordinate(47.6062, -122.3321)

    @pytest.mark.asyncio
    async def test_list_users_in_id_order(self, db_session, seller, buyer):
        users = await self.service.list_users(db_session)
        assert [u.id for u in users] == [seller.id, buyer.id]


class TestDeleteUser:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_delete_cascades_to_listings_and_messages(
        self, db_session, make_listing, seller, buyer
    ):
        bike = await make_listing()
        buyers_listing = await make_listing(title="Lamp", seller_id=buyer.id)
        db_session.add_all([
            Message(sender_id=buyer.id, receiver_id=seller.id, listing_id=bike.id, content="Hi"),
            Message(sender_id=seller.id, receiver_id=buyer.id, content="Hello"),
        ])
        await db_session.flush()

        await self.service.delete(db_session, seller.id)
        db_session.expire_all()

        listings = (await db_session.execute(select(Listing))).scalars().all()
        messages = (await db_session.execute(select(Message))).scalars().all()
        assert [item.id for item in listings] == [buyers_listing.id]
        assert messages == []
        with pytest.raises(NotFoundError):
            await self.service.get(db_session, seller.id)

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete(db_session, 123)
