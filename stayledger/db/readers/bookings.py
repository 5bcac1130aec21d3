from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from stayledger.models.bookings import Booking


def get_booking(
    conn: Connection, booking_id: int, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch a booking by ID.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (int): Booking ID.
        for_update (bool): Lock the row so concurrent cancellations of the
            same booking run one after the other.

    Returns:
        Optional[dict[str, Any]]: Booking columns or None if not found.
    """
    stmt = select(Booking).where(Booking.id == booking_id)
    if for_update:
        stmt = stmt.with_for_update()

    row = conn.execute(stmt).mappings().fetchone()
    return _booking_dict(row) if row else None


def list_bookings_for_listing(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    """Return bookings of a listing, newest first."""
    result = conn.execute(
        select(Booking)
        .where(Booking.listing_id == listing_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return [_booking_dict(row) for row in result.mappings()]


def get_latest_booking_for_email(conn: Connection, email: str) -> Optional[dict[str, Any]]:
    """Return the most recent booking made with ``email``, if any."""
    row = (
        conn.execute(
            select(Booking)
            .where(Booking.email == email)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .limit(1)
        )
        .mappings()
        .fetchone()
    )
    return _booking_dict(row) if row else None


def _booking_dict(row: Any) -> dict[str, Any]:
    # select(Booking) on a Connection yields plain columns keyed by name
    return {key: row[key] for key in Booking.__table__.columns.keys()}
