"""
Unit tests for the API error mapping, with the core components mocked.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from stayledger.dependencies import get_booking_ledger, get_notifier, get_visit_registry
from stayledger.errors import (
    DuplicateBookingRef,
    InvalidTransition,
    ListingNotFound,
    OutOfInventory,
    PersistenceFailure,
    VisitRequestNotFound,
)
from stayledger.main import app
from stayledger.services.booking_ledger import BookingLedger
from stayledger.services.notifications import Notifier
from stayledger.services.visit_requests import VisitRequestRegistry

CONFIRM_BODY = {
    "name": "Asha",
    "email": "asha@example.com",
    "listingId": 1,
    "roomType": "Single",
    "amountMinor": 650000,
}


@pytest.fixture
def ledger() -> Mock:
    return Mock(spec=BookingLedger)


@pytest.fixture
def registry() -> Mock:
    return Mock(spec=VisitRequestRegistry)


@pytest.fixture
def client(ledger: Mock, registry: Mock) -> Generator[TestClient, None, None]:
    """Test client with the ledger, registry and notifier replaced by mocks."""
    app.dependency_overrides[get_booking_ledger] = lambda: ledger
    app.dependency_overrides[get_visit_registry] = lambda: registry
    app.dependency_overrides[get_notifier] = lambda: Mock(spec=Notifier)
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.mark.unit
@pytest.mark.parametrize(
    "error,status_code,tag",
    [
        (OutOfInventory("No 'Single' rooms available"), 409, "OutOfInventory"),
        (ListingNotFound("Listing 1 not found"), 404, "ListingNotFound"),
        (DuplicateBookingRef("Booking reference BK-1 already exists"), 409, "DuplicateBookingRef"),
        (PersistenceFailure("confirm_booking failed: storage error"), 500, "PersistenceFailure"),
    ],
)
def test_confirm_booking_maps_core_errors(
    client: TestClient, ledger: Mock, error: Exception, status_code: int, tag: str
) -> None:
    """Test that each core failure is returned with its status code and tag."""
    ledger.confirm_booking.side_effect = error

    response = client.post("/booking/confirm", json=CONFIRM_BODY)

    assert response.status_code == status_code
    assert response.json() == {"error": tag, "detail": str(error)}


@pytest.mark.unit
def test_unexpected_error_returns_generic_500(client: TestClient, ledger: Mock) -> None:
    """Test that a non-core exception does not leak its message."""
    ledger.confirm_booking.side_effect = RuntimeError("secret internals")

    response = client.post("/booking/confirm", json=CONFIRM_BODY)

    assert response.status_code == 500
    assert "secret internals" not in response.text


@pytest.mark.unit
def test_invalid_body_returns_400(client: TestClient, ledger: Mock) -> None:
    """Test that request validation failures use 400 and never reach the ledger."""
    response = client.post("/booking/confirm", json={**CONFIRM_BODY, "amountMinor": -5})

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    ledger.confirm_booking.assert_not_called()


@pytest.mark.unit
def test_missing_move_in_date_returns_400(client: TestClient, ledger: Mock) -> None:
    """Test that a move-in update without a date is rejected."""
    response = client.put("/booking/5/move-in-date", json={})

    assert response.status_code == 400
    ledger.update_move_in_date.assert_not_called()


@pytest.mark.unit
def test_approve_conflict_returns_409(client: TestClient, registry: Mock) -> None:
    """Test that approving a rejected request reports InvalidTransition."""
    registry.approve.side_effect = InvalidTransition("Visit request 3 is already rejected")

    response = client.put("/visit-request/3/approve")

    assert response.status_code == 409
    assert response.json()["error"] == "InvalidTransition"


@pytest.mark.unit
def test_reject_unknown_returns_404(client: TestClient, registry: Mock) -> None:
    """Test that rejecting an unknown request reports NotFound."""
    registry.reject.side_effect = VisitRequestNotFound("Visit request 99 not found")

    response = client.put("/visit-request/99/reject")

    assert response.status_code == 404
    assert response.json() == {"error": "NotFound", "detail": "Visit request 99 not found"}


@pytest.mark.unit
@pytest.mark.parametrize("query", ["", "?userEmail=a@b.c&listingId=1"])
def test_list_visit_requests_requires_exactly_one_filter(
    client: TestClient, registry: Mock, query: str
) -> None:
    """Test that listing visit requests needs exactly one of userEmail or listingId."""
    response = client.get(f"/visit-requests{query}")

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    registry.list_for_user.assert_not_called()
    registry.list_for_listing.assert_not_called()
