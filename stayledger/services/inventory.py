"""
Inventory store: per-listing room capacity with atomic reserve/release.

Each listing keeps its RoomType records as one ordered, versioned JSON
collection. Every mutation is a single read-modify-write inside a transaction:

1. ``SELECT ... FOR UPDATE`` on the listing row (serializes writers per listing)
2. mutate the typed collection in memory
3. ``UPDATE ... WHERE rooms_version = :read_version`` (compare-and-swap)

The row lock makes the CAS a formality on PostgreSQL; on backends without row
locks the CAS is what turns a lost update into a ConcurrentUpdate failure.

reserve/release are not idempotent. The booking ledger guarantees one call per
state transition and enlists both in its own transaction via ``conn``.
"""

from __future__ import annotations

from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.engine import Connection, Engine

from stayledger.db.engine import transaction
from stayledger.db.readers.listings import get_listing
from stayledger.db.writers.listings import write_rooms
from stayledger.errors import (
    ListingNotFound,
    OutOfInventory,
    PersistenceFailure,
    RoomTypeNotFound,
)
from stayledger.metrics import inventory_operations, release_overflows
from stayledger.schemas.rooms import ListingInventory, RoomType, dump_rooms, parse_rooms

logger = structlog.get_logger(__name__)


def _index_of(rooms: list[RoomType], room_type: str) -> Optional[int]:
    for index, room in enumerate(rooms):
        if room.type == room_type:
            return index
    return None


def take_slot(rooms: list[RoomType], room_type: str) -> tuple[list[RoomType], RoomType]:
    """
    Return a copy of ``rooms`` with one unit of ``room_type`` reserved.

    Raises:
        OutOfInventory: If the room type is unknown or has nothing available.
    """
    index = _index_of(rooms, room_type)
    if index is None:
        raise OutOfInventory(f"Room type {room_type!r} is not offered")

    room = rooms[index]
    if room.available <= 0:
        raise OutOfInventory(f"No {room_type!r} rooms available")

    updated = room.model_copy(update={"available": room.available - 1})
    return rooms[:index] + [updated] + rooms[index + 1 :], updated


def return_slot(
    rooms: list[RoomType], room_type: str
) -> tuple[list[RoomType], RoomType, bool]:
    """
    Return a copy of ``rooms`` with one unit of ``room_type`` released.

    Availability is clamped at total_count. The third element is False when
    the room type was already at full capacity (nothing to release).

    Raises:
        RoomTypeNotFound: If the room type is unknown.
    """
    index = _index_of(rooms, room_type)
    if index is None:
        raise RoomTypeNotFound(f"Room type {room_type!r} is not offered")

    room = rooms[index]
    if room.available >= room.total_count:
        return rooms, room, False

    updated = room.model_copy(update={"available": room.available + 1})
    return rooms[:index] + [updated] + rooms[index + 1 :], updated, True


def _load_rooms(listing: dict) -> list[RoomType]:
    try:
        return parse_rooms(listing["rooms"])
    except PydanticValidationError as e:
        logger.error("stored_rooms_invalid", listing_id=listing["id"], error=str(e))
        raise PersistenceFailure(f"Stored inventory of listing {listing['id']} is invalid") from e


class InventoryStore:
    """
    Reserve and release room capacity of listings.

    Attributes:
        engine: Engine used when the caller does not supply a connection

    Example:
        >>> store = InventoryStore(engine)
        >>> store.reserve(42, "Single")
        RoomType(type='Single', total_count=2, available=1, ...)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def get_inventory(self, listing_id: int) -> ListingInventory:
        """
        Read the current room collection of a listing.

        Raises:
            ListingNotFound: If the listing does not exist.
        """
        with self.engine.connect() as conn:
            listing = get_listing(conn, listing_id)

        if listing is None:
            raise ListingNotFound(f"Listing {listing_id} not found")

        return ListingInventory(
            listing_id=listing["id"],
            title=listing["title"],
            rooms=_load_rooms(listing),
            rooms_version=listing["rooms_version"],
            rating=listing["rating"],
            rating_count=listing["rating_count"],
        )

    def reserve(
        self, listing_id: int, room_type: str, conn: Optional[Connection] = None
    ) -> RoomType:
        """
        Take one unit of ``room_type`` on ``listing_id``.

        Args:
            listing_id: Listing ID
            room_type: RoomType name (exact match)
            conn: Connection of an enclosing transaction, if any

        Returns:
            RoomType: The record after the decrement

        Raises:
            ListingNotFound: Listing does not exist
            OutOfInventory: Room type unknown or fully booked; nothing written
            PersistenceFailure: Storage error; nothing written
        """
        try:
            with transaction(self.engine, "reserve", conn) as tx:
                listing = get_listing(tx, listing_id, for_update=True)
                if listing is None:
                    raise ListingNotFound(f"Listing {listing_id} not found")

                rooms, updated = take_slot(_load_rooms(listing), room_type)
                version = write_rooms(tx, listing_id, dump_rooms(rooms), listing["rooms_version"])
        except OutOfInventory:
            inventory_operations.labels(operation="reserve", outcome="out_of_inventory").inc()
            logger.info("inventory_exhausted", listing_id=listing_id, room_type=room_type)
            raise
        except ListingNotFound:
            inventory_operations.labels(operation="reserve", outcome="not_found").inc()
            raise

        inventory_operations.labels(operation="reserve", outcome="committed").inc()
        logger.info(
            "inventory_reserved",
            listing_id=listing_id,
            room_type=room_type,
            available=updated.available,
            rooms_version=version,
        )
        return updated

    def release(
        self, listing_id: int, room_type: str, conn: Optional[Connection] = None
    ) -> RoomType:
        """
        Give back one unit of ``room_type`` on ``listing_id``.

        A release against a room type that is already at full capacity has no
        matching reservation: it is logged and counted, and nothing is written.

        Args:
            listing_id: Listing ID
            room_type: RoomType name (exact match)
            conn: Connection of an enclosing transaction, if any

        Returns:
            RoomType: The record after the (possibly clamped) increment

        Raises:
            ListingNotFound: Listing does not exist
            RoomTypeNotFound: Room type not offered by the listing
            PersistenceFailure: Storage error; nothing written
        """
        try:
            with transaction(self.engine, "release", conn) as tx:
                listing = get_listing(tx, listing_id, for_update=True)
                if listing is None:
                    raise ListingNotFound(f"Listing {listing_id} not found")

                rooms, updated, changed = return_slot(_load_rooms(listing), room_type)
                if changed:
                    write_rooms(tx, listing_id, dump_rooms(rooms), listing["rooms_version"])
        except (ListingNotFound, RoomTypeNotFound):
            inventory_operations.labels(operation="release", outcome="not_found").inc()
            raise

        if not changed:
            inventory_operations.labels(operation="release", outcome="clamped").inc()
            release_overflows.inc()
            logger.warning(
                "release_without_matching_reservation",
                listing_id=listing_id,
                room_type=room_type,
                total_count=updated.total_count,
            )
            return updated

        inventory_operations.labels(operation="release", outcome="committed").inc()
        logger.info(
            "inventory_released",
            listing_id=listing_id,
            room_type=room_type,
            available=updated.available,
        )
        return updated
