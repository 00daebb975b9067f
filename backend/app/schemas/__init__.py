from app.schemas.room import RoomResponse, RoomAvailabilityResponse
from app.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "RoomResponse", "RoomAvailabilityResponse",
    "BookingCreate", "BookingResponse",
]
