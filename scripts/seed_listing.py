import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import structlog

from stayledger.db.engine import engine, transaction
from stayledger.db.writers.listings import insert_listing
from stayledger.logging_config import setup_logging
from stayledger.schemas.rooms import RoomType, dump_rooms

setup_logging()
logger = structlog.get_logger(__name__)

DEMO_ROOMS = [
    RoomType(type="Single", total_count=4, available=4, price_minor=650000, deposit_minor=1000000),
    RoomType(
        type="Double",
        total_count=2,
        available=2,
        price_minor=900000,
        deposit_minor=1500000,
        is_ac=True,
    ),
]


def main() -> None:
    """
    Insert a demo listing with a Single and a Double room type.

    Usage:
        python scripts/seed_listing.py [title] [owner_email]
    """
    title = sys.argv[1] if len(sys.argv) > 1 else "Demo Residency"
    owner_email = sys.argv[2] if len(sys.argv) > 2 else "owner@example.com"

    try:
        with transaction(engine, "seed_listing") as conn:
            listing_id = insert_listing(conn, title, dump_rooms(DEMO_ROOMS), owner_email)
    except Exception:
        logger.exception("seed_listing_failed", title=title)
        raise

    logger.info("listing_seeded", listing_id=listing_id, title=title, owner_email=owner_email)


if __name__ == "__main__":
    main()
