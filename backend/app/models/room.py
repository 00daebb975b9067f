"""
Room model: the bookable inventory.

Rooms are seeded at startup (see app.db.init_db) and are read-only from the
API's point of view.
"""

from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    room_type = Column(String(20), nullable=False, default="double")
    price_per_night = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False, default=2)

    bookings = relationship("Booking", back_populates="room", order_by="Booking.check_in")

    __table_args__ = (
        CheckConstraint("price_per_night > 0", name="check_room_price_positive"),
        CheckConstraint("capacity > 0", name="check_room_capacity_positive"),
        CheckConstraint("room_type IN ('single', 'double', 'suite')", name="check_room_type"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name}, type={self.room_type})>"
