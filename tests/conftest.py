"""
Shared fixtures for the test suite.

Tests run against an in-memory SQLite database unless DATABASE_URL points
elsewhere. The environment is prepared before any stayledger module is
imported, because configuration is read at import time.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ALLOWED_ORIGINS", "*")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "INFO")

from typing import Any, Callable, Generator, Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from stayledger.db.engine import engine  # noqa: E402
from stayledger.db.writers.listings import insert_listing  # noqa: E402
from stayledger.models.base import Base  # noqa: E402
from stayledger.models.bookings import Booking  # noqa: E402, F401
from stayledger.models.listings import Listing  # noqa: E402, F401
from stayledger.models.reviews import Review  # noqa: E402, F401
from stayledger.models.visit_requests import VisitRequest  # noqa: E402, F401

OWNER_EMAIL = "owner@example.com"


def room(type_: str, total: int, available: Optional[int] = None, is_ac: bool = False) -> dict:
    """One stored RoomType record (camelCase keys, as persisted)."""
    return {
        "type": type_,
        "totalCount": total,
        "available": total if available is None else available,
        "priceMinor": 500000,
        "depositMinor": 1000000,
        "isAC": is_ac,
    }


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Engine with all tables created; dropped again after the test."""
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def make_listing(db_engine: Engine) -> Callable[..., int]:
    """
    Factory inserting a listing and returning its ID.

    Defaults to 2 Single rooms and 1 air-conditioned Double room.
    """

    def _make(
        rooms: Optional[list[dict[str, Any]]] = None,
        title: str = "Test Residency",
        owner_email: Optional[str] = OWNER_EMAIL,
    ) -> int:
        if rooms is None:
            rooms = [room("Single", 2), room("Double", 1, is_ac=True)]
        with db_engine.begin() as conn:
            return insert_listing(conn, title, rooms, owner_email)

    return _make


@pytest.fixture
def listing_id(make_listing: Callable[..., int]) -> int:
    """A listing offering 2 Single rooms and 1 Double room."""
    return make_listing()
