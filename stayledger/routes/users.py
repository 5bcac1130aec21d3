"""Guest-facing lookups."""

from fastapi import APIRouter, Depends

from stayledger.dependencies import get_booking_ledger
from stayledger.schemas.bookings import UserStay
from stayledger.services.booking_ledger import BookingLedger

router = APIRouter()


@router.get("/user/{email}/stay", response_model=UserStay)
def get_stay(email: str, ledger: BookingLedger = Depends(get_booking_ledger)) -> UserStay:
    """
    Latest booking of a guest and the listing it belongs to.

    Example:
        >>> GET /user/guest@example.com/stay
        {"hasStay": false, "booking": null, "listing": null}
    """
    return ledger.find_stay(email)
