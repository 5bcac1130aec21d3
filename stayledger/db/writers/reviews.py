from typing import Optional

from sqlalchemy import insert
from sqlalchemy.engine import Connection

from stayledger.models.reviews import Review
from stayledger.utils.datetime import utc_now


def insert_review(
    conn: Connection,
    listing_id: int,
    user_name: str,
    rating: int,
    text: Optional[str] = None,
    images: Optional[list[str]] = None,
) -> int:
    """
    Append a review row.

    Args:
        conn (Connection): SQLAlchemy DB connection (within transaction).
        listing_id (int): Listing being reviewed.
        user_name (str): Reviewer name.
        rating (int): Star rating 1..5.
        text (Optional[str]): Review body.
        images (Optional[list[str]]): Image URLs.

    Returns:
        int: The new review ID.
    """
    result = conn.execute(
        insert(Review).values(
            listing_id=listing_id,
            user_name=user_name,
            rating=rating,
            text=text or "",
            images=list(images or []),
            created_at=utc_now(),
        )
    )
    return int(result.inserted_primary_key[0])
