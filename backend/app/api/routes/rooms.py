"""
Room endpoints, including the per-room booking list used by the booking form.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.booking import BookingResponse
from app.schemas.room import RoomResponse, RoomAvailabilityResponse
from app.services.booking_service import get_bookings_by_room
from app.services.room_service import check_availability, get_room, list_rooms
from app.services.cache_service import get_cached_room_bookings, set_cached_room_bookings
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/", response_model=list[RoomResponse])
async def list_rooms_endpoint(db: AsyncSession = Depends(get_db)):
    return await list_rooms(db)


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room_endpoint(room_id: int, db: AsyncSession = Depends(get_db)):
    return await get_room(db, room_id)


@router.get("/{room_id}/bookings", response_model=list[BookingResponse])
async def list_room_bookings(room_id: int, db: AsyncSession = Depends(get_db)):
    """
    Bookings for one room, earliest first.
    Cached in Redis until the next booking for this room is created.
    """
    cached = await get_cached_room_bookings(room_id)
    if cached is not None:
        logger.info("room_bookings_cache_hit", room_id=room_id)
        return cached

    await get_room(db, room_id)
    bookings = await get_bookings_by_room(db, room_id)
    payload = [BookingResponse.model_validate(b).model_dump(mode="json") for b in bookings]
    await set_cached_room_bookings(room_id, payload)
    return payload


@router.get("/{room_id}/availability", response_model=RoomAvailabilityResponse)
async def room_availability(
    room_id: int,
    check_in: date = Query(...),
    check_out: date = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Whether the room is free for every night in [check_in, check_out)."""
    available = await check_availability(db, room_id, check_in, check_out)
    return RoomAvailabilityResponse(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        available=available,
    )
