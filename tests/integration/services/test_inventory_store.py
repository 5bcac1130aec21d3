"""
Integration tests for InventoryStore reserve/release against a real database.
"""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine

from stayledger.errors import ListingNotFound, OutOfInventory, RoomTypeNotFound
from stayledger.services.inventory import InventoryStore


def _available(store: InventoryStore, listing_id: int, room_type: str) -> int:
    rooms = store.get_inventory(listing_id).rooms
    return next(r.available for r in rooms if r.type == room_type)


@pytest.mark.integration
def test_reserve_until_exhausted(db_engine: Engine, listing_id: int) -> None:
    """Test that two Single reservations succeed and the third is rejected."""
    store = InventoryStore(db_engine)

    assert store.reserve(listing_id, "Single").available == 1
    assert store.reserve(listing_id, "Single").available == 0

    with pytest.raises(OutOfInventory):
        store.reserve(listing_id, "Single")

    assert _available(store, listing_id, "Single") == 0
    assert _available(store, listing_id, "Double") == 1


@pytest.mark.integration
def test_release_after_reserve_restores_availability(db_engine: Engine, listing_id: int) -> None:
    """Test that a release gives back the slot a reservation took."""
    store = InventoryStore(db_engine)
    store.reserve(listing_id, "Double")

    assert store.release(listing_id, "Double").available == 1
    assert _available(store, listing_id, "Double") == 1


@pytest.mark.integration
def test_release_at_capacity_is_clamped(db_engine: Engine, listing_id: int) -> None:
    """Test that releasing a fully available type leaves it at total_count."""
    store = InventoryStore(db_engine)
    version_before = store.get_inventory(listing_id).rooms_version

    released = store.release(listing_id, "Single")

    assert released.available == released.total_count == 2
    assert store.get_inventory(listing_id).rooms_version == version_before


@pytest.mark.integration
def test_every_write_bumps_rooms_version(db_engine: Engine, listing_id: int) -> None:
    """Test that reserve and release each advance the collection version."""
    store = InventoryStore(db_engine)

    store.reserve(listing_id, "Single")
    store.release(listing_id, "Single")

    assert store.get_inventory(listing_id).rooms_version == 2


@pytest.mark.integration
def test_rejected_reserve_writes_nothing(db_engine: Engine, listing_id: int) -> None:
    """Test that an OutOfInventory failure leaves the stored collection untouched."""
    store = InventoryStore(db_engine)
    before = store.get_inventory(listing_id)

    with pytest.raises(OutOfInventory):
        store.reserve(listing_id, "Penthouse")

    after = store.get_inventory(listing_id)
    assert after.rooms == before.rooms
    assert after.rooms_version == before.rooms_version


@pytest.mark.integration
def test_unknown_listing_raises_listing_not_found(db_engine: Engine) -> None:
    """Test that reserve, release and get_inventory reject unknown listings."""
    store = InventoryStore(db_engine)

    with pytest.raises(ListingNotFound):
        store.reserve(424242, "Single")
    with pytest.raises(ListingNotFound):
        store.release(424242, "Single")
    with pytest.raises(ListingNotFound):
        store.get_inventory(424242)


@pytest.mark.integration
def test_release_unknown_room_type_raises_not_found(db_engine: Engine, listing_id: int) -> None:
    """Test that releasing a room type the listing does not offer is NotFound."""
    store = InventoryStore(db_engine)

    with pytest.raises(RoomTypeNotFound):
        store.release(listing_id, "Penthouse")


@pytest.mark.integration
def test_collection_order_is_preserved(db_engine: Engine, listing_id: int) -> None:
    """Test that mutations keep the room types in their original order."""
    store = InventoryStore(db_engine)
    store.reserve(listing_id, "Double")

    assert [r.type for r in store.get_inventory(listing_id).rooms] == ["Single", "Double"]
