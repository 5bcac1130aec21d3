"""
Rating aggregator: keeps a listing's derived rating consistent with its reviews.

Adding a review locks the listing row first, then appends the review and
recomputes the aggregate from every stored review in the same transaction.
Concurrent submissions for one listing therefore run one after the other and
each recomputation sees all reviews committed before it. Submissions for
different listings do not block each other.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from stayledger.db.engine import transaction
from stayledger.db.readers.listings import get_listing
from stayledger.db.readers.reviews import get_review, list_reviews, rating_totals
from stayledger.db.writers.listings import write_rating
from stayledger.db.writers.reviews import insert_review
from stayledger.errors import ListingNotFound, ValidationError
from stayledger.metrics import reviews_added
from stayledger.schemas.reviews import ReviewRecord

logger = structlog.get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5
_TWO_PLACES = Decimal("0.01")


def average_rating(total: int, count: int) -> Decimal:
    """
    Mean of ``count`` ratings summing to ``total``, rounded half-up to 2 places.

    Returns Decimal("0.00") when there are no ratings.
    """
    if count == 0:
        return Decimal("0.00")
    return (Decimal(total) / Decimal(count)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def validate_review(user_name: Optional[str], rating: object) -> None:
    """
    Raises:
        ValidationError: Missing user name or rating outside 1..5
    """
    if not user_name or not str(user_name).strip():
        raise ValidationError("userName is required")
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")


class RatingAggregator:
    """
    Append reviews and maintain ``listings.rating`` / ``listings.rating_count``.

    Example:
        >>> aggregator = RatingAggregator(engine)
        >>> aggregator.add_review(42, "Asha", 5, text="Clean rooms")
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def add_review(
        self,
        listing_id: int,
        user_name: str,
        rating: int,
        text: Optional[str] = None,
        images: Optional[list[str]] = None,
    ) -> ReviewRecord:
        """
        Store a review and refresh the listing's aggregate rating.

        Raises:
            ValidationError: Invalid user name or rating
            ListingNotFound: Listing does not exist
            PersistenceFailure: Storage error; neither review nor aggregate written
        """
        validate_review(user_name, rating)

        with transaction(self.engine, "add_review") as conn:
            if get_listing(conn, listing_id, for_update=True) is None:
                raise ListingNotFound(f"Listing {listing_id} not found")

            review_id = insert_review(
                conn,
                listing_id=listing_id,
                user_name=user_name.strip(),
                rating=rating,
                text=text,
                images=images,
            )
            rating_value, count = self._recompute(conn, listing_id)
            row = get_review(conn, review_id)

        reviews_added.inc()
        logger.info(
            "review_added",
            listing_id=listing_id,
            review_id=review_id,
            rating=rating,
            listing_rating=str(rating_value),
            rating_count=count,
        )
        return ReviewRecord.model_validate(row)

    def recompute(self, listing_id: int) -> tuple[Decimal, int]:
        """
        Rebuild a listing's aggregate from its reviews.

        Returns:
            tuple[Decimal, int]: (rating, rating_count) as written

        Raises:
            ListingNotFound: Listing does not exist
        """
        with transaction(self.engine, "recompute_rating") as conn:
            if get_listing(conn, listing_id, for_update=True) is None:
                raise ListingNotFound(f"Listing {listing_id} not found")
            return self._recompute(conn, listing_id)

    def list_reviews(self, listing_id: int) -> list[ReviewRecord]:
        """Reviews of a listing, newest first."""
        with self.engine.connect() as conn:
            rows = list_reviews(conn, listing_id)
        return [ReviewRecord.model_validate(row) for row in rows]

    @staticmethod
    def _recompute(conn: Connection, listing_id: int) -> tuple[Decimal, int]:
        # Caller holds the listing row lock
        count, total = rating_totals(conn, listing_id)
        rating_value = average_rating(total, count)
        write_rating(conn, listing_id, rating_value, count)
        return rating_value, count
