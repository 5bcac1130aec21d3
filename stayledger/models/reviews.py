from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import func

from stayledger.config import SCHEMA
from stayledger.models.base import Base, JSONType


class Review(Base):
    """
    ORM model for user reviews of a listing.

    Reviews are append-only. Every insert is followed, in the same
    transaction, by a recomputation of the listing's rating and rating_count.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("ix_reviews_listing_created", "listing_id", "created_at"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Integer, ForeignKey(f"{SCHEMA}.listings.id"), nullable=False)
    user_name = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)
    text = Column(Text, nullable=False, default="")
    images = Column(JSONType, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
