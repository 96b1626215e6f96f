"""
Local Marketplace Backend - Test Configuration (conftest.py)
=============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: in-memory SQLite engine with every table created
    ├── db_session: AsyncSession bound to db_engine
    ├── seller / buyer: persisted users
    ├── make_listing: factory for persisted listings
    ├── mock_db_session: AsyncMock session for failure-path tests
    └── test_client: HTTPX AsyncClient whose requests hit db_engine
"""

import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any marketplace import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_DEMO_DATA"] = "false"

from marketplace.database import Base, get_db_session  # noqa: E402
from marketplace.models.listing import Listing  # noqa: E402
from marketplace.models.user import User  # noqa: E402
from marketplace.security import hash_password  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A private in-memory database per test.

    StaticPool keeps the single connection alive, otherwise every new
    connection would see a fresh, empty :memory: database.
    """
    import marketplace.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def seller(db_session):
    user = User(
        username="johndoe",
        email="john@example.com",
        password_hash=hash_password("secret-1"),
        phone_number="555-123-4567",
        average_rating=4.5,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def buyer(db_session):
    user = User(
        username="janedoe",
        email="jane@example.com",
        password_hash=hash_password("secret-2"),
        phone_number="555-987-6543",
        average_rating=4.8,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
def make_listing(db_session, seller):
    """
    Factory for persisted listings.

    `age_days` backdates listed_at so tests control the browse order.

    Usage:
        bike = await make_listing(title="Bike", age_days=5)
    """

    async def _make(
        title: str = "Mountain Bike",
        price: str = "250.00",
        category: str = "Sports & Outdoors",
        latitude: float = 37.7749,
        longitude: float = -122.4194,
        age_days: int = 0,
        is_active: bool = True,
        seller_id: int = None,
    ) -> Listing:
        listing = Listing(
            seller_id=seller_id or seller.id,
            title=title,
            description=f"{title} for sale",
            price=Decimal(price),
            category=category,
            condition="Used - Good",
            image_urls=[],
            latitude=latitude,
            longitude=longitude,
            location="",
            listed_at=datetime.now(timezone.utc) - timedelta(days=age_days),
            is_active=is_active,
        )
        db_session.add(listing)
        await db_session.flush()
        return listing

    return _make


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_db_failure(mock_db_session):
            mock_db_session.execute.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    get_db_session is overridden so each request gets its own session on the
    test engine, with the same commit/rollback behaviour as production.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from marketplace.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
