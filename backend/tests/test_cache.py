"""
Tests for the Redis cache in front of the public venue listing.
"""

import json

import fakeredis
import pytest
import pytest_asyncio
from httpx import AsyncClient

from venue_booking.api.routes import venues as venue_routes
from venue_booking.services import cache_service


@pytest_asyncio.fixture
async def fake_redis(monkeypatch):
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    monkeypatch.setattr(cache_service.settings, "REDIS_ENABLED", True)
    monkeypatch.setattr(cache_service, "_redis_client", client)
    yield client
    await client.flushall()


@pytest.mark.asyncio
async def test_public_listing_is_cached(client: AsyncClient, db_session, test_venue, fake_redis):
    first = await client.get("/venues")
    assert first.status_code == 200
    cached = json.loads(await fake_redis.get(cache_service.VENUE_LIST_KEY))
    assert [v["id"] for v in cached] == [test_venue.id]

    # Written behind the API's back, so only a cache miss would show it
    test_venue.name = "Renamed Hall"
    await db_session.commit()

    second = await client.get("/venues")
    assert second.json()[0]["name"] == "Grand Hall"


@pytest.mark.asyncio
async def test_review_invalidates_listing(client: AsyncClient, test_venue, user_headers, fake_redis):
    await client.get("/venues")
    assert await fake_redis.get(cache_service.VENUE_LIST_KEY) is not None

    await client.post(f"/venues/{test_venue.id}/reviews", json={"rating": 4}, headers=user_headers)
    assert await fake_redis.get(cache_service.VENUE_LIST_KEY) is None

    fresh = await client.get("/venues")
    assert fresh.json()[0]["rating"] == 4.0


@pytest.mark.asyncio
async def test_owner_listing_bypasses_cache(client: AsyncClient, test_venue, owner_headers, fake_redis):
    response = await client.get("/venues", headers=owner_headers)
    assert response.status_code == 200
    assert await fake_redis.get(cache_service.VENUE_LIST_KEY) is None


@pytest.mark.asyncio
async def test_unreachable_redis_is_a_cache_miss(client: AsyncClient, test_venue, monkeypatch):
    server = fakeredis.FakeServer()
    server.connected = False
    monkeypatch.setattr(cache_service.settings, "REDIS_ENABLED", True)
    monkeypatch.setattr(cache_service, "_redis_client", fakeredis.FakeAsyncRedis(server=server))

    response = await client.get("/venues")
    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == [test_venue.id]


@pytest.mark.asyncio
async def test_health_reports_disabled_cache(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_listing_read_after_invalidation_sees_committed_write(
    committing_client: AsyncClient, committed_booking, fake_redis, monkeypatch,
):
    real_invalidate = venue_routes.invalidate_venue_cache
    seen = []

    async def invalidate_then_read():
        await real_invalidate()
        listing = await committing_client.get("/venues")
        seen.append(listing.json()[0]["availability"])

    monkeypatch.setattr(venue_routes, "invalidate_venue_cache", invalidate_then_read)

    response = await committing_client.put(
        f"/venues/{committed_booking.venue_id}/availability",
        json={"availability": False},
        headers=committed_booking.owner_headers,
    )
    assert response.status_code == 200
    assert seen == [False]

    listing = await committing_client.get("/venues")
    assert listing.json()[0]["availability"] is False


@pytest.mark.asyncio
async def test_new_review_visible_in_cached_listing(
    committing_client: AsyncClient, committed_booking, fake_redis,
):
    before = await committing_client.get("/venues")
    assert before.json()[0]["rating"] == 0.0

    await committing_client.post(
        f"/venues/{committed_booking.venue_id}/reviews",
        json={"rating": 3},
        headers=committed_booking.reviewer_headers,
    )

    after = await committing_client.get("/venues")
    assert after.json()[0]["rating"] == 3.0
    assert after.json()[0]["reviews"][0]["user"]["name"] == "Uma User"
