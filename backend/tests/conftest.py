"""
Pytest fixtures for test database, client, and seeded rooms.

Each test gets a fresh SQLite file: tables are created and rooms seeded
before the test, and the engine is disposed afterwards.
"""

import os
from datetime import date, timedelta
from typing import AsyncGenerator

# Must be set before the app (and its cached settings) are imported
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_hotel_booking.db")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.init_db import seed_rooms
from app.db.session import build_engine, get_db
from app.models.booking import Booking
from app.schemas.booking import BookingCreate


def iso(day: date) -> str:
    return day.isoformat()


@pytest.fixture
def today() -> date:
    return date.today()


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh SQLite file with tables and seeded rooms, configured like the app's engine."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_rooms(session)
        await session.commit()

    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload(today: date) -> dict:
    """A valid request body: room 1, tomorrow for six nights."""
    return {
        "room_id": 1,
        "guest_name": "Test Guest",
        "guest_email": "test@example.com",
        "check_in": iso(today + timedelta(days=1)),
        "check_out": iso(today + timedelta(days=7)),
    }


@pytest_asyncio.fixture
async def existing_booking(db_session: AsyncSession, today: date) -> Booking:
    """Room 1 booked from today+3 to today+7."""
    booking = Booking(
        room_id=1,
        guest_name="Existing Guest",
        guest_email="existing@example.com",
        check_in=today + timedelta(days=3),
        check_out=today + timedelta(days=7),
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


@pytest.fixture
def make_request(booking_payload: dict):
    """Factory for BookingCreate: the valid payload with some fields replaced."""

    def _make(**overrides) -> BookingCreate:
        return BookingCreate(**{**booking_payload, **overrides})

    return _make
