from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.sql import func

from stayledger.config import SCHEMA
from stayledger.models.base import Base

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

# Predicate of the partial unique index; ON CONFLICT targets must repeat it verbatim
PENDING_PREDICATE = text("status = 'pending'")


class VisitRequest(Base):
    """
    ORM model for scheduled listing viewings.

    A request starts ``pending`` and moves once to ``approved`` or
    ``rejected``. The partial unique index guarantees at most one pending
    row per (user_email, listing_id); re-requesting updates that row.
    """

    __tablename__ = "visit_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_visit_requests_status"
        ),
        Index(
            "uq_visit_requests_pending",
            "user_email",
            "listing_id",
            unique=True,
            postgresql_where=PENDING_PREDICATE,
            sqlite_where=PENDING_PREDICATE,
        ),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=True)
    listing_id = Column(
        Integer, ForeignKey(f"{SCHEMA}.listings.id"), nullable=False, index=True
    )
    owner_email = Column(String(255), nullable=True)
    visit_date = Column(Date, nullable=False)
    visit_time = Column(String(20), nullable=False)
    status = Column(String(16), nullable=False, server_default=text("'pending'"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
