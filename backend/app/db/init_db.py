"""
Schema creation and room seeding.

Used at application startup for local SQLite databases and by the test
suite. Deployed PostgreSQL databases are managed by alembic instead.

    python -m app.db.init_db           # create tables, seed rooms if empty
    python -m app.db.init_db --reset   # wipe bookings and rooms, then reseed
"""

import argparse
import asyncio
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.db.base import Base
from app.models.booking import Booking
from app.models.room import Room
from app.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

# Fixed ids so a reset database always has the same room references
DEFAULT_ROOMS = [
    {"id": 1, "name": "101", "room_type": "single", "price_per_night": Decimal("89.00"), "capacity": 1},
    {"id": 2, "name": "102", "room_type": "double", "price_per_night": Decimal("119.00"), "capacity": 2},
    {"id": 3, "name": "201", "room_type": "double", "price_per_night": Decimal("129.00"), "capacity": 2},
    {"id": 4, "name": "202", "room_type": "suite", "price_per_night": Decimal("249.00"), "capacity": 4},
    {"id": 5, "name": "301", "room_type": "suite", "price_per_night": Decimal("299.00"), "capacity": 4},
]


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_rooms(db: AsyncSession) -> int:
    """Insert DEFAULT_ROOMS when the rooms table is empty. Returns rows added."""
    existing = (await db.execute(select(func.count()).select_from(Room))).scalar()
    if existing:
        return 0

    db.add_all(Room(**room) for room in DEFAULT_ROOMS)
    await db.flush()
    logger.info("rooms_seeded", count=len(DEFAULT_ROOMS))
    return len(DEFAULT_ROOMS)


async def reset_db(db: AsyncSession) -> None:
    """Delete every booking and room, then reseed the rooms."""
    await db.execute(delete(Booking))
    await db.execute(delete(Room))
    await db.flush()
    await seed_rooms(db)
    logger.info("database_reset")


async def init_db(engine: AsyncEngine, seed: bool = True) -> None:
    await create_tables(engine)
    if not seed:
        return

    async with AsyncSession(engine, expire_on_commit=False) as db:
        await seed_rooms(db)
        await db.commit()


async def _run(reset: bool) -> None:
    from app.db.session import engine

    await create_tables(engine)
    async with AsyncSession(engine, expire_on_commit=False) as db:
        if reset:
            await reset_db(db)
        else:
            await seed_rooms(db)
        await db.commit()
    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the booking tables and seed rooms.")
    parser.add_argument("--reset", action="store_true", help="delete all bookings and rooms first")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(_run(args.reset))


if __name__ == "__main__":
    main()
