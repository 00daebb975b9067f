"""
Pydantic schemas for room responses.
"""

from datetime import date
from decimal import Decimal
from pydantic import BaseModel


class RoomResponse(BaseModel):
    id: int
    name: str
    room_type: str
    price_per_night: Decimal
    capacity: int

    model_config = {"from_attributes": True}


class RoomAvailabilityResponse(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    available: bool
