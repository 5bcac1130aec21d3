"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from stayledger.dependencies import (
    get_booking_ledger,
    get_db_engine,
    get_inventory_store,
    get_notifier,
    get_rating_aggregator,
    get_visit_registry,
)
from stayledger.services.booking_ledger import BookingLedger
from stayledger.services.notifications import Notifier


@pytest.mark.unit
def test_get_db_engine_dependency() -> None:
    """Test that get_db_engine yields the process-wide engine."""
    engine = next(get_db_engine())

    assert isinstance(engine, Engine)


@pytest.mark.unit
def test_components_share_the_injected_engine() -> None:
    """Test that every core component is constructed with the engine it is given."""
    mock_engine = Mock(spec=Engine)

    inventory = get_inventory_store(mock_engine)
    ledger = get_booking_ledger(inventory)

    assert inventory.engine is mock_engine
    assert ledger.engine is mock_engine
    assert ledger.inventory is inventory
    assert get_rating_aggregator(mock_engine).engine is mock_engine
    assert get_visit_registry(mock_engine).engine is mock_engine


@pytest.mark.unit
def test_get_notifier_returns_notifier() -> None:
    """Test that get_notifier builds a Notifier."""
    assert isinstance(get_notifier(), Notifier)


@pytest.mark.unit
def test_dependency_injection_can_be_overridden() -> None:
    """Test that the engine dependency can be replaced for a whole component chain."""
    app = FastAPI()

    @app.get("/engine-name")
    def engine_name(ledger: BookingLedger = Depends(get_booking_ledger)) -> dict[str, str]:
        """Report the name of the engine the ledger was built with."""
        return {"engine_name": ledger.engine.name}

    mock_engine = Mock(spec=Engine)
    mock_engine.name = "mock_engine"
    app.dependency_overrides[get_db_engine] = lambda: mock_engine

    client = TestClient(app)
    response = client.get("/engine-name")

    assert response.status_code == 200
    assert response.json() == {"engine_name": "mock_engine"}
