from app.models.room import Room
from app.models.booking import Booking

__all__ = ["Room", "Booking"]
