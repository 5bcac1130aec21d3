"""
FastAPI dependency injection providers.

The engine is created once at process start (stayledger.db.engine) and every
core component receives it at construction through these providers instead of
reaching for a global connection handle.

Dependencies can be overridden in tests using app.dependency_overrides, making
it easy to inject a different engine or mock components.
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends
from sqlalchemy.engine import Engine

from stayledger.db.engine import engine
from stayledger.services.booking_ledger import BookingLedger
from stayledger.services.inventory import InventoryStore
from stayledger.services.notifications import Notifier
from stayledger.services.ratings import RatingAggregator
from stayledger.services.visit_requests import VisitRequestRegistry


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> from unittest.mock import Mock
        >>> mock_engine = Mock(spec=Engine)
        >>> app.dependency_overrides[get_db_engine] = lambda: mock_engine
    """
    yield engine


def get_inventory_store(db_engine: Engine = Depends(get_db_engine)) -> InventoryStore:
    return InventoryStore(db_engine)


def get_booking_ledger(
    inventory: InventoryStore = Depends(get_inventory_store),
) -> BookingLedger:
    return BookingLedger(inventory.engine, inventory)


def get_rating_aggregator(db_engine: Engine = Depends(get_db_engine)) -> RatingAggregator:
    return RatingAggregator(db_engine)


def get_visit_registry(db_engine: Engine = Depends(get_db_engine)) -> VisitRequestRegistry:
    return VisitRequestRegistry(db_engine)


def get_notifier() -> Notifier:
    return Notifier()
