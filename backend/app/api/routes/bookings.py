"""
Booking endpoints: create with validation and overlap check, read by id or room.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.booking import BookingCreate, BookingResponse
from app.services.booking_service import (
    create_booking,
    get_all_bookings,
    get_booking,
    get_bookings_by_room,
)
from app.services.cache_service import invalidate_room_bookings

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book a room for a guest.

    Errors come back as {"detail": message}, ready to show in the booking form:
    400 for invalid input, 404 for an unknown room, 409 when the dates
    overlap an existing booking for the same room.
    """
    booking = await create_booking(db, booking_data)
    # Commit before dropping the cached list so a concurrent read can't
    # re-cache the list without this booking
    await db.commit()
    await invalidate_room_bookings(booking.room_id)
    return booking


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    room_id: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """All bookings ordered by check-in, optionally for one room only."""
    if room_id is not None:
        return await get_bookings_by_room(db, room_id)
    return await get_all_bookings(db)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_endpoint(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await get_booking(db, booking_id)
