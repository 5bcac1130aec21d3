"""Listing-scoped routes: reviews, inventory and guests of a listing."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from stayledger.dependencies import get_booking_ledger, get_inventory_store, get_rating_aggregator
from stayledger.errors import StayLedgerError
from stayledger.schemas.bookings import BookingRecord
from stayledger.schemas.reviews import ReviewCreatePayload, ReviewRecord
from stayledger.schemas.rooms import ListingInventory
from stayledger.services.booking_ledger import BookingLedger
from stayledger.services.inventory import InventoryStore
from stayledger.services.ratings import RatingAggregator

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/listing/{listing_id}/review",
    status_code=status.HTTP_201_CREATED,
    response_model=ReviewRecord,
)
def add_review(
    listing_id: int,
    payload: ReviewCreatePayload,
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
) -> ReviewRecord:
    """
    Add a review; the listing's rating and ratingCount are recomputed.

    Args:
        listing_id: Listing being reviewed
        payload: Reviewer name, rating 1..5, optional text and images
        aggregator: Rating aggregator

    Returns:
        ReviewRecord: The stored review
    """
    try:
        return aggregator.add_review(
            listing_id,
            user_name=payload.user_name,
            rating=payload.rating,
            text=payload.text,
            images=payload.images,
        )
    except StayLedgerError:
        raise
    except Exception as e:
        logger.exception("review_add_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/listing/{listing_id}/reviews", response_model=list[ReviewRecord])
def list_reviews(
    listing_id: int,
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
) -> list[ReviewRecord]:
    """Reviews of a listing, newest first."""
    return aggregator.list_reviews(listing_id)


@router.get("/listing/{listing_id}/rooms", response_model=ListingInventory)
def get_rooms(
    listing_id: int,
    inventory: InventoryStore = Depends(get_inventory_store),
) -> ListingInventory:
    """Current room collection, its version and the listing's rating."""
    return inventory.get_inventory(listing_id)


@router.get("/listing/{listing_id}/bookings", response_model=list[BookingRecord])
def list_bookings(
    listing_id: int,
    ledger: BookingLedger = Depends(get_booking_ledger),
) -> list[BookingRecord]:
    """Guests of a listing, newest first."""
    return ledger.list_for_listing(listing_id)
