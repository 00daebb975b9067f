"""
Booking model: one guest's stay in one room.

Key design decisions:
- check_in / check_out are calendar dates; the stay is the half-open
  interval [check_in, check_out), so a check-out day can be the next
  guest's check-in day
- CHECK constraint keeps check_out strictly after check_in
- Composite index on (room_id, check_in, check_out) backs the overlap query
- On PostgreSQL the initial migration also adds an exclusion constraint so
  overlapping rows for one room cannot be committed even under a race
"""

from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=False)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)

    room = relationship("Room", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
        Index("ix_bookings_room_dates", "room_id", "check_in", "check_out"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, room={self.room_id}, {self.check_in}..{self.check_out})>"
