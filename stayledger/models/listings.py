from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, text
from sqlalchemy.sql import func

from stayledger.config import SCHEMA
from stayledger.models.base import Base, JSONType


class Listing(Base):
    """
    ORM model for bookable accommodation listings.

    Listing CRUD lives outside this service; the core only reads listings and
    mutates two pieces of state on them:

    - ``rooms``: the ordered RoomType collection, rewritten as a whole by the
      inventory store. ``rooms_version`` is bumped on every write and used as
      the compare-and-swap guard.
    - ``rating`` / ``rating_count``: derived from the reviews table by the
      rating aggregator, never edited directly.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_listings_rating_range"),
        CheckConstraint("rating_count >= 0", name="ck_listings_rating_count"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    owner_email = Column(String(255), nullable=True)
    rooms = Column(JSONType, nullable=False, default=list)
    rooms_version = Column(Integer, nullable=False, default=0, server_default=text("0"))
    rating = Column(Numeric(3, 2), nullable=False, default=0, server_default=text("0"))
    rating_count = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
