"""
Tests for the per-room booking cache, using an in-memory stand-in for the
Redis client.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.booking import Booking
from app.services import cache_service


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.deleted = []

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, key):
        self.deleted.append(key)
        self.store.pop(key, None)

    async def info(self, section):
        return {"keyspace_hits": 3, "keyspace_misses": 1}


class BrokenRedis(FakeRedis):
    async def get(self, key):
        raise RedisConnectionError("connection reset")

    async def setex(self, key, ttl, value):
        raise RedisConnectionError("connection reset")


@pytest.fixture
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()

    async def get_fake():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake)
    return fake


@pytest.mark.asyncio
async def test_room_bookings_cached_and_invalidated(client: AsyncClient, fake_redis, booking_payload):
    response = await client.get("/api/v1/rooms/1/bookings")
    assert response.json() == []
    assert "bookings:room:1" in fake_redis.store

    created = await client.post("/api/v1/bookings/", json=booking_payload)
    assert created.status_code == 201
    assert fake_redis.deleted == ["bookings:room:1"]

    response = await client.get("/api/v1/rooms/1/bookings")
    assert [b["id"] for b in response.json()] == [created.json()["id"]]


@pytest.mark.asyncio
async def test_cache_hit_served_without_database(client: AsyncClient, fake_redis):
    fake_redis.store["bookings:room:42"] = '[{"id": 7, "room_id": 42, "guest_name": "Cached", ' \
        '"guest_email": "c@example.com", "check_in": "2030-01-01", "check_out": "2030-01-02", ' \
        '"created_at": "2029-12-01T10:00:00"}]'

    response = await client.get("/api/v1/rooms/42/bookings")
    assert response.status_code == 200
    assert response.json()[0]["guest_name"] == "Cached"


@pytest.mark.asyncio
async def test_cache_errors_fall_back_to_database(client: AsyncClient, monkeypatch, existing_booking):
    broken = BrokenRedis()

    async def get_broken():
        return broken

    monkeypatch.setattr(cache_service, "get_redis", get_broken)

    response = await client.get("/api/v1/rooms/1/bookings")
    assert response.status_code == 200
    assert response.json()[0]["id"] == existing_booking.id


@pytest.mark.asyncio
async def test_cache_stats(fake_redis):
    stats = await cache_service.get_cache_stats()
    assert stats == {"status": "connected", "hits": 3, "misses": 1, "hit_rate": 75.0}


@pytest.mark.asyncio
async def test_disabled_cache_is_noop():
    assert await cache_service.get_redis() is None
    assert await cache_service.get_cached_room_bookings(1) is None
    await cache_service.invalidate_room_bookings(1)


@pytest.mark.asyncio
async def test_invalidation_happens_after_commit(client: AsyncClient, session_factory, monkeypatch, booking_payload):
    """When the key is dropped, another connection must already see the new booking."""
    seen_at_delete = []

    class CommitCheckingRedis(FakeRedis):
        async def delete(self, key):
            async with session_factory() as other:
                seen_at_delete.append((await other.execute(
                    select(func.count()).select_from(Booking).where(Booking.room_id == 1)
                )).scalar())
            await super().delete(key)

    fake = CommitCheckingRedis()

    async def get_fake():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake)

    response = await client.post("/api/v1/bookings/", json=booking_payload)
    assert response.status_code == 201
    assert seen_at_delete == [1]
