# models/bookings.py

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    text,
)
from sqlalchemy.sql import func

from stayledger.config import SCHEMA
from stayledger.models.base import Base


class Booking(Base):
    """
    ORM model for confirmed occupancy records (a guest in a room type).

    Rows are created by the booking ledger on payment confirmation, in the
    same transaction that reserves a slot of ``room_type`` on the listing, and
    deleted on cancellation in the same transaction that releases the slot.
    ``room_no`` and ``floor`` are assigned later by the listing owner.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("status IN ('Due', 'Paid')", name="ck_bookings_status"),
        CheckConstraint("amount_minor >= 0", name="ck_bookings_amount"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(
        Integer, ForeignKey(f"{SCHEMA}.listings.id"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    mobile = Column(String(20), nullable=True)
    room_type = Column(String(50), nullable=False)
    room_no = Column(String(50), nullable=True)
    floor = Column(String(50), nullable=True)
    status = Column(String(16), nullable=False, server_default=text("'Due'"))
    booking_ref = Column(String(100), nullable=False, unique=True)
    amount_minor = Column(BigInteger, nullable=False)
    move_in_date = Column(Date, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
