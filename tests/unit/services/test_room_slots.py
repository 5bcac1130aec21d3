"""
Unit tests for the pure inventory mutations (take_slot / return_slot).
"""

from __future__ import annotations

import pytest

from stayledger.errors import OutOfInventory, RoomTypeNotFound
from stayledger.schemas.rooms import RoomType, parse_rooms
from stayledger.services.inventory import return_slot, take_slot


@pytest.fixture
def rooms() -> list[RoomType]:
    """Single (1 of 2 free), Double (none free), Suite (all free)."""
    return parse_rooms(
        [
            {"type": "Single", "totalCount": 2, "available": 1},
            {"type": "Double", "totalCount": 1, "available": 0},
            {"type": "Suite", "totalCount": 1, "available": 1, "isAC": True},
        ]
    )


@pytest.mark.unit
def test_take_slot_decrements_only_matching_type(rooms: list[RoomType]) -> None:
    """Test that take_slot reduces available of the named type and leaves others untouched."""
    updated_rooms, updated = take_slot(rooms, "Single")

    assert updated.available == 0
    assert [r.available for r in updated_rooms] == [0, 0, 1]
    assert [r.type for r in updated_rooms] == ["Single", "Double", "Suite"]


@pytest.mark.unit
def test_take_slot_does_not_mutate_input(rooms: list[RoomType]) -> None:
    """Test that the original collection is left as it was."""
    take_slot(rooms, "Suite")

    assert rooms[2].available == 1


@pytest.mark.unit
def test_take_slot_rejects_exhausted_type(rooms: list[RoomType]) -> None:
    """Test that reserving a fully booked type raises OutOfInventory."""
    with pytest.raises(OutOfInventory):
        take_slot(rooms, "Double")


@pytest.mark.unit
def test_take_slot_rejects_unknown_type(rooms: list[RoomType]) -> None:
    """Test that reserving a type the listing does not offer raises OutOfInventory."""
    with pytest.raises(OutOfInventory):
        take_slot(rooms, "Penthouse")


@pytest.mark.unit
def test_take_slot_matches_type_exactly(rooms: list[RoomType]) -> None:
    """Test that room type matching is case sensitive."""
    with pytest.raises(OutOfInventory):
        take_slot(rooms, "single")


@pytest.mark.unit
def test_return_slot_increments_available(rooms: list[RoomType]) -> None:
    """Test that return_slot gives one unit back."""
    updated_rooms, updated, changed = return_slot(rooms, "Double")

    assert changed is True
    assert updated.available == 1
    assert updated_rooms[1].available == 1


@pytest.mark.unit
def test_return_slot_clamps_at_total_count(rooms: list[RoomType]) -> None:
    """Test that releasing a type already at full capacity changes nothing."""
    updated_rooms, updated, changed = return_slot(rooms, "Suite")

    assert changed is False
    assert updated.available == updated.total_count == 1
    assert updated_rooms == rooms


@pytest.mark.unit
def test_return_slot_unknown_type_raises_not_found(rooms: list[RoomType]) -> None:
    """Test that releasing an unknown type raises RoomTypeNotFound."""
    with pytest.raises(RoomTypeNotFound):
        return_slot(rooms, "Penthouse")


@pytest.mark.unit
def test_take_then_return_restores_collection(rooms: list[RoomType]) -> None:
    """Test that a reserve followed by a release leaves the collection unchanged."""
    taken, _ = take_slot(rooms, "Single")
    restored, _, changed = return_slot(taken, "Single")

    assert changed is True
    assert restored == rooms
