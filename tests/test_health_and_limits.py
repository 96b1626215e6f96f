"""
Local Marketplace Backend - Health Check, Rate Limit and Seed Tests
====================================================================
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select

from marketplace.middleware.rate_limit import RateLimitMiddleware
from marketplace.models.listing import Listing
from marketplace.models.user import User
from marketplace.services.seed import seed_demo_data


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, db_engine):
        with patch("marketplace.database.engine", db_engine):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_database_down(self, test_client):
        broken = MagicMock()
        broken.connect.side_effect = OSError("connection refused")

        with patch("marketplace.database.engine", broken):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


def _limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_after_limit(self):
        transport = ASGITransport(app=_limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            blocked = await client.get("/ping")

        assert blocked.status_code == 429
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert 1 <= int(blocked.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_rejection_carries_request_id(self):
        transport = ASGITransport(app=_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/ping")
            tagged = await client.get("/ping", headers={"X-Request-ID": "trace-42"})
            untagged = await client.get("/ping")

        assert tagged.status_code == 429
        assert tagged.json()["request_id"] == "trace-42"
        assert untagged.json()["request_id"] is None

    @pytest.mark.asyncio
    async def test_health_is_exempt(self):
        transport = ASGITransport(app=_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200


class TestSeed:

    @pytest.mark.asyncio
    async def test_seeds_empty_database_once(self, db_session):
        assert await seed_demo_data(db_session) is True
        assert await seed_demo_data(db_session) is False

        users = (await db_session.execute(select(func.count(User.id)))).scalar()
        listings = (await db_session.execute(select(Listing.title))).scalars().all()
        assert users == 2
        assert sorted(listings) == ["Mountain Bike", "iPhone 14 Pro"]
