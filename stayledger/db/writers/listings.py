from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from stayledger.errors import ConcurrentUpdate
from stayledger.models.listings import Listing
from stayledger.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def write_rooms(
    conn: Connection, listing_id: int, rooms: list[dict[str, Any]], expected_version: int
) -> int:
    """
    Replace a listing's room collection if nobody else wrote it since it was read.

    The whole collection is rewritten and ``rooms_version`` bumped in one
    conditional UPDATE (compare-and-swap on the version read earlier).

    Args:
        conn (Connection): SQLAlchemy DB connection (within transaction).
        listing_id (int): Listing ID.
        rooms (list[dict]): Full serialized RoomType collection.
        expected_version (int): rooms_version observed when the collection was read.

    Returns:
        int: The new rooms_version.

    Raises:
        ConcurrentUpdate: If the version moved (or the listing vanished).
    """
    new_version = expected_version + 1
    stmt = (
        update(Listing)
        .where(Listing.id == listing_id)
        .where(Listing.rooms_version == expected_version)
        .values(rooms=rooms, rooms_version=new_version, updated_at=utc_now())
    )

    result = conn.execute(stmt)
    if result.rowcount != 1:
        logger.warning(
            "rooms_version_conflict", listing_id=listing_id, expected_version=expected_version
        )
        raise ConcurrentUpdate(f"Inventory of listing {listing_id} changed concurrently")

    return new_version


def write_rating(conn: Connection, listing_id: int, rating: Decimal, rating_count: int) -> None:
    """
    Store the derived rating fields of a listing.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        listing_id (int): Listing ID.
        rating (Decimal): Average rating, already rounded to 2 places.
        rating_count (int): Number of reviews.
    """
    stmt = (
        update(Listing)
        .where(Listing.id == listing_id)
        .values(rating=rating, rating_count=rating_count, updated_at=utc_now())
    )
    conn.execute(stmt)


def insert_listing(
    conn: Connection,
    title: str,
    rooms: list[dict[str, Any]],
    owner_email: Optional[str] = None,
) -> int:
    """
    Insert a listing with its initial room collection.

    Listing management belongs to another service; this is used to seed
    development databases and test fixtures.

    Returns:
        int: The new listing ID.
    """
    now = utc_now()
    result = conn.execute(
        insert(Listing).values(
            title=title,
            owner_email=owner_email,
            rooms=rooms,
            rooms_version=0,
            rating=Decimal("0"),
            rating_count=0,
            created_at=now,
            updated_at=now,
        )
    )
    return int(result.inserted_primary_key[0])
