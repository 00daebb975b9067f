"""
Pydantic schemas for booking-related request/response validation.

BookingCreate accepts the raw form values (dates as strings, anything
missing as None) so that booking_service.validate_booking produces the
user-facing error messages instead of a generic 422.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class BookingCreate(BaseModel):
    room_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    room_id: int
    guest_name: str
    guest_email: str
    check_in: date
    check_out: date
    created_at: datetime

    model_config = {"from_attributes": True}
