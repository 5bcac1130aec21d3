"""
Booking ledger: turns confirmed payments into bookings and reverses them.

The ledger is the only caller of InventoryStore.reserve/release for bookings.
Each operation runs in exactly one database transaction, and the inventory
mutation is enlisted in that same transaction, so:

- confirm: reserve + insert commit together; if the insert fails the
  reservation is rolled back with it.
- cancel: the booking row is locked, released and deleted together; a second
  cancellation of the same booking finds no row and releases nothing.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from stayledger.db.engine import transaction
from stayledger.db.readers.bookings import (
    get_booking,
    get_latest_booking_for_email,
    list_bookings_for_listing,
)
from stayledger.db.readers.listings import get_listing
from stayledger.db.writers.bookings import delete_booking, insert_booking, update_booking
from stayledger.errors import (
    BookingNotFound,
    DuplicateBookingRef,
    StayLedgerError,
    ValidationError,
)
from stayledger.metrics import bookings_total
from stayledger.schemas.bookings import BookingRecord, ListingSummary, UserStay
from stayledger.services.inventory import InventoryStore
from stayledger.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

STATUS_PAID = "Paid"


def generate_booking_ref() -> str:
    """Return a globally unique booking reference, e.g. ``BK-3F2A...``."""
    return f"BK-{uuid.uuid4().hex.upper()}"


class BookingLedger:
    """
    Create, cancel and amend bookings.

    Attributes:
        engine: Engine each ledger transaction is opened on
        inventory: Inventory store enlisted in ledger transactions
    """

    def __init__(self, engine: Engine, inventory: Optional[InventoryStore] = None):
        self.engine = engine
        self.inventory = inventory or InventoryStore(engine)

    def confirm_booking(
        self,
        name: str,
        email: Optional[str],
        mobile: Optional[str],
        listing_id: int,
        room_type: str,
        amount_minor: int,
        booking_ref: Optional[str] = None,
        move_in_date: Optional[date] = None,
    ) -> BookingRecord:
        """
        Record a paid booking and reserve its room.

        Args:
            name: Guest name
            email: Guest email
            mobile: Guest mobile number
            listing_id: Listing being booked
            room_type: RoomType name on the listing
            amount_minor: Amount paid, minor currency units
            booking_ref: Payment reference; generated when absent
            move_in_date: Defaults to the payment date

        Returns:
            BookingRecord: The persisted booking (status Paid)

        Raises:
            ValidationError: Missing name or negative amount
            ListingNotFound: Listing does not exist
            OutOfInventory: No capacity for room_type; no booking created
            DuplicateBookingRef: booking_ref already used; reservation rolled back
            PersistenceFailure: Storage error; reservation rolled back
        """
        if not name or not name.strip():
            raise ValidationError("name is required")
        if amount_minor < 0:
            raise ValidationError("amountMinor must not be negative")

        ref = booking_ref or generate_booking_ref()
        paid_at = utc_now()

        try:
            with transaction(self.engine, "confirm_booking") as conn:
                self.inventory.reserve(listing_id, room_type, conn=conn)

                try:
                    booking_id = insert_booking(
                        conn,
                        {
                            "listing_id": listing_id,
                            "name": name.strip(),
                            "email": email,
                            "mobile": mobile,
                            "room_type": room_type,
                            "status": STATUS_PAID,
                            "booking_ref": ref,
                            "amount_minor": amount_minor,
                            "move_in_date": move_in_date or paid_at.date(),
                            "paid_at": paid_at,
                        },
                    )
                except IntegrityError as e:
                    if "booking_ref" in str(e.orig):
                        raise DuplicateBookingRef(f"Booking reference {ref} already exists") from e
                    raise

                row = get_booking(conn, booking_id)
        except StayLedgerError as e:
            bookings_total.labels(operation="confirm", outcome=e.tag).inc()
            logger.warning(
                "booking_confirm_rejected",
                listing_id=listing_id,
                room_type=room_type,
                booking_ref=ref,
                error=e.tag,
                detail=e.detail,
            )
            raise

        bookings_total.labels(operation="confirm", outcome="success").inc()
        logger.info(
            "booking_confirmed",
            booking_id=booking_id,
            listing_id=listing_id,
            room_type=room_type,
            booking_ref=ref,
        )
        return BookingRecord.model_validate(row)

    def cancel_booking(self, booking_id: int) -> None:
        """
        Delete a booking and release its room.

        Raises:
            BookingNotFound: Booking does not exist (or was already cancelled)
            NotFound: The booked listing or room type no longer exists; nothing changed
            PersistenceFailure: Storage error; nothing changed
        """
        try:
            with transaction(self.engine, "cancel_booking") as conn:
                booking = get_booking(conn, booking_id, for_update=True)
                if booking is None:
                    raise BookingNotFound(f"Booking {booking_id} not found")

                self.inventory.release(booking["listing_id"], booking["room_type"], conn=conn)
                delete_booking(conn, booking_id)
        except StayLedgerError as e:
            bookings_total.labels(operation="cancel", outcome=e.tag).inc()
            logger.warning("booking_cancel_rejected", booking_id=booking_id, error=e.tag)
            raise

        bookings_total.labels(operation="cancel", outcome="success").inc()
        logger.info(
            "booking_cancelled",
            booking_id=booking_id,
            listing_id=booking["listing_id"],
            room_type=booking["room_type"],
        )

    def update_move_in_date(self, booking_id: int, move_in_date: date) -> BookingRecord:
        """
        Change the move-in date of a booking. No inventory effect.

        Raises:
            BookingNotFound: Booking does not exist
        """
        return self._amend(booking_id, "move_in_date", {"move_in_date": move_in_date})

    def assign_room(
        self, booking_id: int, room_no: Optional[str] = None, floor: Optional[str] = None
    ) -> BookingRecord:
        """
        Record the physical room the owner gave the guest. No inventory effect.

        Raises:
            ValidationError: Neither room_no nor floor given
            BookingNotFound: Booking does not exist
        """
        data = {k: v for k, v in {"room_no": room_no, "floor": floor}.items() if v is not None}
        if not data:
            raise ValidationError("roomNo or floor is required")
        return self._amend(booking_id, "room_assignment", data)

    def _amend(self, booking_id: int, operation: str, data: dict[str, Any]) -> BookingRecord:
        try:
            with transaction(self.engine, operation) as conn:
                if not update_booking(conn, booking_id, data):
                    raise BookingNotFound(f"Booking {booking_id} not found")
                row = get_booking(conn, booking_id)
        except StayLedgerError as e:
            bookings_total.labels(operation=operation, outcome=e.tag).inc()
            raise

        bookings_total.labels(operation=operation, outcome="success").inc()
        logger.info("booking_updated", booking_id=booking_id, fields=sorted(data))
        return BookingRecord.model_validate(row)

    def get_booking(self, booking_id: int) -> BookingRecord:
        with self.engine.connect() as conn:
            row = get_booking(conn, booking_id)
        if row is None:
            raise BookingNotFound(f"Booking {booking_id} not found")
        return BookingRecord.model_validate(row)

    def list_for_listing(self, listing_id: int) -> list[BookingRecord]:
        with self.engine.connect() as conn:
            rows = list_bookings_for_listing(conn, listing_id)
        return [BookingRecord.model_validate(row) for row in rows]

    def find_stay(self, email: str) -> UserStay:
        """
        Return the latest booking made with ``email`` and its listing.

        Returns:
            UserStay: ``has_stay`` False when there is no booking (or its
            listing is gone)
        """
        with self.engine.connect() as conn:
            booking = get_latest_booking_for_email(conn, email)
            listing = get_listing(conn, booking["listing_id"]) if booking else None

        if booking is None or listing is None:
            return UserStay(has_stay=False)

        return UserStay(
            has_stay=True,
            booking=BookingRecord.model_validate(booking),
            listing=ListingSummary(
                id=listing["id"],
                title=listing["title"],
                owner_email=listing["owner_email"],
                rating=listing["rating"],
                rating_count=listing["rating_count"],
            ),
        )
