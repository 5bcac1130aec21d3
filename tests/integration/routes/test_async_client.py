"""
Integration tests driving the API through an async HTTP client.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import Engine

from stayledger.main import app


@pytest.mark.integration
@pytest.mark.asyncio
async def test_confirm_and_cancel_over_async_client(db_engine: Engine, listing_id: int) -> None:
    """Test a booking round trip through the ASGI app, including the request ID header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        confirmed = await ac.post(
            "/booking/confirm",
            json={
                "name": "Asha",
                "listingId": listing_id,
                "roomType": "Double",
                "amountMinor": 0,
            },
        )
        booking_id = confirmed.json()["id"]
        exhausted = await ac.post(
            "/booking/confirm",
            json={"name": "Ravi", "listingId": listing_id, "roomType": "Double", "amountMinor": 0},
        )
        cancelled = await ac.delete(f"/booking/{booking_id}/cancel")
        rooms = (await ac.get(f"/listing/{listing_id}/rooms")).json()["rooms"]

    assert confirmed.status_code == 201
    assert "X-Request-ID" in confirmed.headers
    assert exhausted.status_code == 409
    assert cancelled.json() == {"success": True}
    assert rooms[1]["available"] == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_visit_request_listing_over_async_client(
    db_engine: Engine, listing_id: int
) -> None:
    """Test that a visit request shows up when listing by user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        created = await ac.post(
            "/visit-request",
            json={
                "userEmail": "ravi@example.com",
                "listingId": listing_id,
                "visitDate": "2026-11-01",
                "visitTime": "6:00 PM",
            },
        )
        listed = await ac.get("/visit-requests", params={"userEmail": "ravi@example.com"})

    assert created.status_code == 201
    assert [r["id"] for r in listed.json()] == [created.json()["id"]]
