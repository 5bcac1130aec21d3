"""
Integration tests for the booking writers.
"""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine

from stayledger.db.readers.bookings import get_booking
from stayledger.db.writers.bookings import delete_booking, insert_booking, update_booking


def _insert(db_engine: Engine, listing_id: int) -> int:
    with db_engine.begin() as conn:
        return insert_booking(
            conn,
            {
                "listing_id": listing_id,
                "name": "Asha",
                "room_type": "Single",
                "status": "Paid",
                "booking_ref": "PAY-1",
                "amount_minor": 650000,
            },
        )


@pytest.mark.integration
def test_update_booking_leaves_caller_data_untouched(db_engine: Engine, listing_id: int) -> None:
    """Test that the update timestamp is added to a copy, not to the caller's dict."""
    booking_id = _insert(db_engine, listing_id)
    data = {"room_no": "204"}

    with db_engine.begin() as conn:
        assert update_booking(conn, booking_id, data) is True
        stored = get_booking(conn, booking_id)

    assert data == {"room_no": "204"}
    assert stored is not None
    assert stored["room_no"] == "204"


@pytest.mark.integration
def test_update_and_delete_unknown_booking(db_engine: Engine) -> None:
    """Test that writers report a missing booking instead of raising."""
    with db_engine.begin() as conn:
        assert update_booking(conn, 424242, {"floor": "2"}) is False
        assert delete_booking(conn, 424242) is False
