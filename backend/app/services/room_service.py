"""
Room queries: listing, lookup and availability.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.room import Room
from app.services.booking_service import find_overlapping_booking
from app.core.metrics import record_db_operation


async def list_rooms(db: AsyncSession) -> list[Room]:
    result = await db.execute(select(Room).order_by(Room.id))
    record_db_operation("read")
    return list(result.scalars().all())


async def get_room(db: AsyncSession, room_id: int) -> Room:
    """Get a single room by ID."""
    result = await db.execute(select(Room).where(Room.id == room_id))
    room = result.scalar_one_or_none()
    record_db_operation("read")

    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found",
        )
    return room


async def check_availability(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
) -> bool:
    """
    True when no booking in the room overlaps [check_in, check_out).
    This is a read-only preview; create_booking re-checks under a lock.
    """
    if check_out <= check_in:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-out date must be after the check-in date",
        )
    await get_room(db, room_id)
    return await find_overlapping_booking(db, room_id, check_in, check_out) is None
