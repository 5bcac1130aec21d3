from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from stayledger.models.listings import Listing


def get_listing(
    conn: Connection, listing_id: int, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch the inventory and rating state of a listing.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (int): Listing ID.
        for_update (bool): Take a row lock (SELECT ... FOR UPDATE) that
            serializes inventory and rating writers on this listing until
            the transaction ends.

    Returns:
        Optional[dict[str, Any]]: Listing columns or None if not found.
    """
    stmt = select(
        Listing.id,
        Listing.title,
        Listing.owner_email,
        Listing.rooms,
        Listing.rooms_version,
        Listing.rating,
        Listing.rating_count,
    ).where(Listing.id == listing_id)

    if for_update:
        stmt = stmt.with_for_update()

    row = conn.execute(stmt).mappings().fetchone()
    return dict(row) if row else None


def listing_exists(conn: Connection, listing_id: int) -> bool:
    """
    Check if a listing exists.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (int): Listing ID to check.

    Returns:
        bool: True if the listing exists, False otherwise.
    """
    result = conn.execute(select(Listing.id).where(Listing.id == listing_id))
    return result.fetchone() is not None
