"""
Concurrency tests for inventory reservations on a shared database file.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.engine import Engine

from stayledger.db.engine import create_db_engine
from stayledger.db.writers.listings import insert_listing
from stayledger.errors import OutOfInventory, StayLedgerError
from stayledger.models.base import Base
from stayledger.services.inventory import InventoryStore

CAPACITY = 5
ATTEMPTS = 12


@pytest.fixture
def file_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Engine on a database file so each thread gets its own connection."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.mark.integration
def test_concurrent_reserves_never_oversell(file_engine: Engine) -> None:
    """Test that available equals capacity minus successful reservations under contention."""
    with file_engine.begin() as conn:
        listing_id = insert_listing(
            conn,
            "Race Residency",
            [{"type": "Single", "totalCount": CAPACITY, "available": CAPACITY}],
        )
    store = InventoryStore(file_engine)

    def attempt(_: int) -> bool:
        try:
            store.reserve(listing_id, "Single")
        except StayLedgerError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(ATTEMPTS)))

    successes = sum(outcomes)
    inventory = store.get_inventory(listing_id)
    available = inventory.rooms[0].available

    assert 0 < successes <= CAPACITY
    assert available == CAPACITY - successes
    assert available >= 0
    assert inventory.rooms_version == successes


@pytest.mark.integration
def test_sequential_retries_drain_capacity_exactly(file_engine: Engine) -> None:
    """Test that retrying after lost races ends with zero availability and then rejects."""
    with file_engine.begin() as conn:
        listing_id = insert_listing(
            conn,
            "Race Residency",
            [{"type": "Single", "totalCount": CAPACITY, "available": CAPACITY}],
        )
    store = InventoryStore(file_engine)

    for _ in range(CAPACITY):
        store.reserve(listing_id, "Single")

    with pytest.raises(OutOfInventory):
        store.reserve(listing_id, "Single")

    assert store.get_inventory(listing_id).rooms[0].available == 0
