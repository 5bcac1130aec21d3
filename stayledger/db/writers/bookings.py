from typing import Any

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from stayledger.models.bookings import Booking
from stayledger.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_booking(conn: Connection, data: dict[str, Any]) -> int:
    """
    Insert a booking row.

    Args:
        conn (Connection): SQLAlchemy DB connection (within transaction).
        data (dict[str, Any]): Booking column values.

    Returns:
        int: The new booking ID.

    Raises:
        sqlalchemy.exc.IntegrityError: On a duplicate booking_ref.
    """
    now = utc_now()
    values = {"created_at": now, "updated_at": now, **data}

    result = conn.execute(insert(Booking).values(**values))
    return int(result.inserted_primary_key[0])


def update_booking(conn: Connection, booking_id: int, data: dict[str, Any]) -> bool:
    """
    Update booking fields.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        booking_id (int): Booking ID.
        data (dict): Fields to update.

    Returns:
        bool: True if a row was updated, False if the booking does not exist.
    """
    values = {**data, "updated_at": utc_now()}

    stmt = update(Booking).where(Booking.id == booking_id).values(**values)
    result = conn.execute(stmt)
    return result.rowcount == 1


def delete_booking(conn: Connection, booking_id: int) -> bool:
    """
    Permanently delete a booking.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        booking_id (int): Booking ID.

    Returns:
        bool: True if a row was deleted.
    """
    result = conn.execute(delete(Booking).where(Booking.id == booking_id))
    return result.rowcount == 1
