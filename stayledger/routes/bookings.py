"""Booking ledger routes: confirm, cancel and amend bookings."""

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from stayledger.dependencies import get_booking_ledger, get_notifier
from stayledger.errors import StayLedgerError
from stayledger.schemas.bookings import (
    BookingConfirmPayload,
    BookingRecord,
    CancelResult,
    MoveInDatePayload,
    RoomAssignmentPayload,
)
from stayledger.services.booking_ledger import BookingLedger
from stayledger.services.notifications import Notifier

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/booking/confirm", status_code=status.HTTP_201_CREATED, response_model=BookingRecord)
def confirm_booking(
    payload: BookingConfirmPayload,
    background_tasks: BackgroundTasks,
    ledger: BookingLedger = Depends(get_booking_ledger),
    notifier: Notifier = Depends(get_notifier),
) -> BookingRecord:
    """
    Record a paid booking and reserve one unit of its room type.

    Args:
        payload: Validated payment-succeeded fact
        background_tasks: FastAPI background task runner
        ledger: Booking ledger
        notifier: Sends the confirmation to the guest after commit

    Returns:
        BookingRecord: The created booking (409 OutOfInventory, 404 ListingNotFound)
    """
    try:
        booking = ledger.confirm_booking(
            name=payload.name,
            email=payload.email,
            mobile=payload.mobile,
            listing_id=payload.listing_id,
            room_type=payload.room_type,
            amount_minor=payload.amount_minor,
            booking_ref=payload.booking_ref,
            move_in_date=payload.move_in_date,
        )
    except StayLedgerError:
        raise
    except Exception as e:
        logger.exception("booking_confirm_failed", listing_id=payload.listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    background_tasks.add_task(notifier.booking_confirmed, booking)
    return booking


@router.get("/booking/{booking_id}", response_model=BookingRecord)
def get_booking(
    booking_id: int, ledger: BookingLedger = Depends(get_booking_ledger)
) -> BookingRecord:
    return ledger.get_booking(booking_id)


@router.delete("/booking/{booking_id}/cancel", response_model=CancelResult)
def cancel_booking(
    booking_id: int, ledger: BookingLedger = Depends(get_booking_ledger)
) -> CancelResult:
    """
    Cancel a booking and release its room.

    Returns:
        CancelResult: ``{"success": true}`` (404 NotFound if absent)
    """
    try:
        ledger.cancel_booking(booking_id)
    except StayLedgerError:
        raise
    except Exception as e:
        logger.exception("booking_cancel_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    return CancelResult(success=True)


@router.put("/booking/{booking_id}/move-in-date", response_model=BookingRecord)
def update_move_in_date(
    booking_id: int,
    payload: MoveInDatePayload,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> BookingRecord:
    """Change the move-in date (400 when absent, 404 when the booking is unknown)."""
    return ledger.update_move_in_date(booking_id, payload.move_in_date)


@router.put("/booking/{booking_id}/room-assignment", response_model=BookingRecord)
def assign_room(
    booking_id: int,
    payload: RoomAssignmentPayload,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> BookingRecord:
    """Record the room number and floor the owner gave the guest."""
    return ledger.assign_room(booking_id, room_no=payload.room_no, floor=payload.floor)
