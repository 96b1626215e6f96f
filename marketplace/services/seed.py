"""
Demo data for local development.

Runs on startup when SEED_DEMO_DATA=true and only touches empty tables, so
restarting the server never duplicates rows.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.listing import Listing
from marketplace.models.user import User
from marketplace.security import hash_password

logger = logging.getLogger(__name__)


async def seed_demo_data(db: AsyncSession) -> bool:
    """Insert two users and two listings into an empty database. Returns True if it seeded."""
    user_count = (await db.execute(select(func.count(User.id)))).scalar() or 0
    if user_count:
        logger.debug("Skipping demo seed: %d users already present", user_count)
        return False

    now = datetime.now(timezone.utc)
    john = User(
        username="johndoe",
        email="john@example.com",
        password_hash=hash_password("demo-password-1"),
        phone_number="555-123-4567",
        average_rating=4.5,
        created_at=now - timedelta(days=30),
    )
    jane = User(
        username="janedoe",
        email="jane@example.com",
        password_hash=hash_password("demo-password-2"),
        phone_number="555-987-6543",
        average_rating=4.8,
        created_at=now - timedelta(days=15),
    )
    db.add_all([john, jane])
    await db.flush()

    db.add_all([
        Listing(
            seller_id=john.id,
            title="Mountain Bike",
            description="Lightly used mountain bike in great condition. Perfect for trails and city riding.",
            price=Decimal("250.00"),
            category="Sports & Outdoors",
            condition="Used - Good",
            image_urls=["https://example.com/bike1.jpg"],
            latitude=37.7749,
            longitude=-122.4194,
            location="San Francisco, CA",
            listed_at=now - timedelta(days=5),
            is_active=True,
        ),
        Listing(
            seller_id=jane.id,
            title="iPhone 14 Pro",
            description="iPhone 14 Pro in excellent condition. Includes charger and original box.",
            price=Decimal("899.99"),
            category="Electronics",
            condition="Used - Excellent",
            image_urls=["https://example.com/iphone1.jpg", "https://example.com/iphone2.jpg"],
            latitude=37.3382,
            longitude=-121.8863,
            location="San Jose, CA",
            listed_at=now - timedelta(days=2),
            is_active=True,
        ),
    ])
    await db.flush()
    logger.info("Seeded demo data: 2 users, 2 listings")
    return True
