from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from stayledger.models.reviews import Review

_REVIEW_COLUMNS = (
    Review.id,
    Review.listing_id,
    Review.user_name,
    Review.rating,
    Review.text,
    Review.images,
    Review.created_at,
)


def get_review(conn: Connection, review_id: int) -> Optional[dict[str, Any]]:
    row = conn.execute(select(*_REVIEW_COLUMNS).where(Review.id == review_id)).mappings().fetchone()
    return dict(row) if row else None


def list_reviews(conn: Connection, listing_id: int) -> list[dict[str, Any]]:
    """
    Return all reviews of a listing, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (int): Listing ID.

    Returns:
        list[dict[str, Any]]: Review rows.
    """
    result = conn.execute(
        select(*_REVIEW_COLUMNS)
        .where(Review.listing_id == listing_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return [dict(row) for row in result.mappings()]


def rating_totals(conn: Connection, listing_id: int) -> tuple[int, int]:
    """
    Aggregate all historical ratings of a listing in one statement.

    Returns:
        tuple[int, int]: (review count, sum of ratings). Integers, so the
        average can be computed exactly by the caller.
    """
    row = conn.execute(
        select(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0)).where(
            Review.listing_id == listing_id
        )
    ).fetchone()
    if row is None:
        return 0, 0
    return int(row[0]), int(row[1])
