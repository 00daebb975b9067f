"""
Booking service: validation, overlap detection and persistence.

VALIDATION
==========

validate_booking() checks one rule at a time and raises on the first
failure, so the caller always gets exactly one message it can show the
guest verbatim:

  blank fields -> date format -> real calendar date -> not in the past
  -> check-out after check-in -> room reference present

OVERLAP RULE
============

A stay occupies the half-open interval [check_in, check_out). Two stays in
the same room collide when

    existing.check_in < new.check_out AND existing.check_out > new.check_in

so a guest may check in on the day the previous guest checks out.

ATOMICITY
=========

create_booking() runs the room lookup, the overlap query and the insert in
the caller's transaction. The room row is read with SELECT ... FOR UPDATE,
which serializes concurrent bookings for the same room on PostgreSQL (SQLite
has no row locks; its single writer already serializes). The PostgreSQL
exclusion constraint from the initial migration is the last line: if it
fires, the IntegrityError is reported as the same overlap conflict.
"""

import re
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.booking import Booking
from app.models.room import Room
from app.schemas.booking import BookingCreate
from app.core.logging import get_logger
from app.core.metrics import booking_latency, record_booking_attempt, record_db_operation

logger = get_logger(__name__)

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
OVERLAP_CONSTRAINT = "no_room_overlap"
OVERLAP_MESSAGE = "Booking dates overlap an existing booking for this room"


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _parse_date(value: str, label: str) -> date:
    # Shape already matched DATE_PATTERN; this catches 2025-02-30 and friends
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise _bad_request(f"{label} date is not a valid date") from None


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_booking(data: BookingCreate, today: Optional[date] = None) -> tuple[date, date]:
    """
    Check a booking request without touching the database.
    Returns the parsed (check_in, check_out) dates.
    Raises 400 with a guest-facing message on the first violated rule.
    """
    if _is_blank(data.guest_name):
        raise _bad_request("Guest name is required")
    if _is_blank(data.guest_email):
        raise _bad_request("Guest email is required")
    if not data.check_in:
        raise _bad_request("Check-in date is required")
    if not data.check_out:
        raise _bad_request("Check-out date is required")

    # Format of both strings is checked before either is parsed
    for value, label in ((data.check_in, "Check-in"), (data.check_out, "Check-out")):
        if not DATE_PATTERN.fullmatch(value):
            raise _bad_request(f"{label} date must be in YYYY-MM-DD format")
    check_in = _parse_date(data.check_in, "Check-in")
    check_out = _parse_date(data.check_out, "Check-out")

    if check_in < (today or date.today()):
        raise _bad_request("Check-in date must be today or later")
    if check_out <= check_in:
        raise _bad_request("Check-out date must be after the check-in date")

    if not data.room_id:
        raise _bad_request("Room ID is required")

    return check_in, check_out


def _overlapping(room_id: int, check_in: date, check_out: date):
    return select(Booking.id).where(
        Booking.room_id == room_id,
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    ).limit(1)


async def find_overlapping_booking(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
) -> Optional[int]:
    """Id of one booking in this room sharing a night with [check_in, check_out), if any."""
    result = await db.execute(_overlapping(room_id, check_in, check_out))
    record_db_operation("read")
    return result.scalar_one_or_none()


async def create_booking(
    db: AsyncSession,
    data: BookingCreate,
    today: Optional[date] = None,
) -> Booking:
    """
    Validate, check for overlaps and insert one booking.
    400 on invalid input, 404 for an unknown room, 409 on overlap.
    """
    with booking_latency.time():
        try:
            check_in, check_out = validate_booking(data, today=today)
        except HTTPException as exc:
            logger.info("booking_rejected", reason=exc.detail, room_id=data.room_id)
            record_booking_attempt("rejected")
            raise

        room = (
            await db.execute(select(Room).where(Room.id == data.room_id).with_for_update())
        ).scalar_one_or_none()
        if not room:
            logger.info("booking_rejected", reason="room_not_found", room_id=data.room_id)
            record_booking_attempt("not_found")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Room not found",
            )

        conflict_id = await find_overlapping_booking(db, room.id, check_in, check_out)
        if conflict_id is not None:
            logger.warning(
                "booking_overlap",
                room_id=room.id,
                check_in=str(check_in),
                check_out=str(check_out),
                conflicting_booking_id=conflict_id,
            )
            record_booking_attempt("conflict")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=OVERLAP_MESSAGE)

        booking = Booking(
            room_id=room.id,
            guest_name=data.guest_name.strip(),
            guest_email=data.guest_email.strip(),
            check_in=check_in,
            check_out=check_out,
        )
        db.add(booking)
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            if OVERLAP_CONSTRAINT not in str(exc.orig):
                raise
            logger.warning("booking_overlap", room_id=room.id, source="constraint")
            record_booking_attempt("conflict")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=OVERLAP_MESSAGE)

        await db.refresh(booking)
        record_db_operation("write")
        record_booking_attempt("success")

        logger.info(
            "booking_created",
            booking_id=booking.id,
            room_id=booking.room_id,
            check_in=str(check_in),
            check_out=str(check_out),
        )
        return booking


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    """Get a single booking by ID."""
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    record_db_operation("read")

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


async def get_bookings_by_room(db: AsyncSession, room_id: int) -> list[Booking]:
    """All bookings for one room, earliest stay first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.room_id == room_id)
        .order_by(Booking.check_in, Booking.id)
    )
    record_db_operation("read")
    return list(result.scalars().all())


async def get_all_bookings(db: AsyncSession) -> list[Booking]:
    result = await db.execute(select(Booking).order_by(Booking.check_in, Booking.id))
    record_db_operation("read")
    return list(result.scalars().all())
