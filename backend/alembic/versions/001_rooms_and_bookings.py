"""Initial schema: rooms and bookings, with overlap protection on PostgreSQL.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("room_type", sa.String(20), nullable=False, server_default=sa.text("'double'")),
        sa.Column("price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("2")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_rooms_name"),
        sa.CheckConstraint("price_per_night > 0", name="check_room_price_positive"),
        sa.CheckConstraint("capacity > 0", name="check_room_capacity_positive"),
        sa.CheckConstraint("room_type IN ('single', 'double', 'suite')", name="check_room_type"),
    )
    op.create_index("ix_rooms_id", "rooms", ["id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("guest_email", sa.String(255), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_room_id", "bookings", ["room_id"])
    # Covers the overlap query: WHERE room_id = ? AND check_in < ? AND check_out > ?
    op.create_index("ix_bookings_room_dates", "bookings", ["room_id", "check_in", "check_out"])

    if op.get_bind().dialect.name == "postgresql":
        # daterange '[)' matches the application rule: check-out day may be
        # the next guest's check-in day
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            "ALTER TABLE bookings ADD CONSTRAINT no_room_overlap "
            "EXCLUDE USING gist (room_id WITH =, daterange(check_in, check_out, '[)') WITH &&)"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS no_room_overlap")
    op.drop_table("bookings")
    op.drop_table("rooms")
