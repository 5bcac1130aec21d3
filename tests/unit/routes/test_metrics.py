"""
Unit tests for metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from stayledger.main import app
from stayledger.metrics import (
    bookings_total,
    inventory_operations,
    release_overflows,
    reviews_added,
    transaction_duration,
    visit_requests_total,
)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    """Test that /metrics endpoint returns Prometheus text format."""
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_custom_metrics(client: TestClient) -> None:
    """Test that /metrics endpoint includes the booking and inventory metrics."""
    bookings_total.labels(operation="confirm", outcome="success").inc()
    inventory_operations.labels(operation="reserve", outcome="committed").inc()
    release_overflows.inc()
    reviews_added.inc()
    visit_requests_total.labels(action="created").inc()
    transaction_duration.labels(operation="reserve").observe(0.01)

    content = client.get("/metrics").text

    assert "stayledger_bookings_total" in content
    assert "stayledger_inventory_operations_total" in content
    assert "stayledger_release_overflows_total" in content
    assert "stayledger_reviews_added_total" in content
    assert "stayledger_visit_requests_total" in content
    assert "stayledger_transaction_duration_seconds" in content


@pytest.mark.unit
def test_metrics_endpoint_includes_labels(client: TestClient) -> None:
    """Test that labelled series are exposed with their label values."""
    bookings_total.labels(operation="cancel", outcome="NotFound").inc()

    content = client.get("/metrics").text

    assert 'operation="cancel"' in content
    assert 'outcome="NotFound"' in content
