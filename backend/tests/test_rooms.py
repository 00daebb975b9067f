"""
Tests for room endpoints and availability.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.db.init_db import DEFAULT_ROOMS, reset_db, seed_rooms
from app.services.room_service import list_rooms


@pytest.mark.asyncio
async def test_list_rooms(client: AsyncClient):
    response = await client.get("/api/v1/rooms/")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == len(DEFAULT_ROOMS)
    assert [r["id"] for r in data] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_get_room(client: AsyncClient):
    response = await client.get("/api/v1/rooms/1")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "101"
    assert data["room_type"] == "single"


@pytest.mark.asyncio
async def test_get_room_not_found(client: AsyncClient):
    response = await client.get("/api/v1/rooms/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Room not found"


@pytest.mark.asyncio
async def test_room_bookings(client: AsyncClient, existing_booking):
    response = await client.get("/api/v1/rooms/1/bookings")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == existing_booking.id

    empty = await client.get("/api/v1/rooms/2/bookings")
    assert empty.json() == []


@pytest.mark.asyncio
async def test_room_bookings_unknown_room(client: AsyncClient):
    response = await client.get("/api/v1/rooms/99999/bookings")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_availability(client: AsyncClient, existing_booking):
    """existing_booking holds room 1 for [check_in, check_out)."""
    url = "/api/v1/rooms/1/availability"

    taken = await client.get(url, params={
        "check_in": (existing_booking.check_in + timedelta(days=1)).isoformat(),
        "check_out": (existing_booking.check_out + timedelta(days=1)).isoformat(),
    })
    assert taken.status_code == 200
    assert taken.json()["available"] is False

    free = await client.get(url, params={
        "check_in": existing_booking.check_out.isoformat(),
        "check_out": (existing_booking.check_out + timedelta(days=2)).isoformat(),
    })
    assert free.json()["available"] is True


@pytest.mark.asyncio
async def test_availability_bad_range(client: AsyncClient, today):
    response = await client.get("/api/v1/rooms/1/availability", params={
        "check_in": today.isoformat(),
        "check_out": today.isoformat(),
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reset_db_removes_bookings_and_reseeds(db_session, existing_booking, client: AsyncClient):
    await reset_db(db_session)
    await db_session.commit()

    assert len(await list_rooms(db_session)) == len(DEFAULT_ROOMS)
    response = await client.get("/api/v1/bookings/")
    assert response.json() == []


@pytest.mark.asyncio
async def test_health_and_metrics(client: AsyncClient):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["cache"] == {"status": "disabled"}

    metrics = await client.get("/metrics")
    assert metrics.status_code == 200
    assert "booking_attempts_total" in metrics.text


@pytest.mark.asyncio
async def test_seed_rooms_only_fills_empty_table(db_session):
    assert await seed_rooms(db_session) == 0
