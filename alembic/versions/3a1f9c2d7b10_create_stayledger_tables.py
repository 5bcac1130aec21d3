"""Create listings, bookings, reviews and visit_requests tables

Revision ID: 3a1f9c2d7b10
Revises:
Create Date: 2026-10-16 10:12:31.402118

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3a1f9c2d7b10"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "stayledger"

# JSONB on PostgreSQL, plain JSON elsewhere
JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")
PENDING_PREDICATE = sa.text("status = 'pending'")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("owner_email", sa.String(length=255), nullable=True),
        sa.Column("rooms", JSON_TYPE, nullable=False),
        sa.Column("rooms_version", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), server_default=sa.text("0"), nullable=False),
        sa.Column("rating_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_listings_rating_range"),
        sa.CheckConstraint("rating_count >= 0", name="ck_listings_rating_count"),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("listing_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("mobile", sa.String(length=20), nullable=True),
        sa.Column("room_type", sa.String(length=50), nullable=False),
        sa.Column("room_no", sa.String(length=50), nullable=True),
        sa.Column("floor", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=16), server_default=sa.text("'Due'"), nullable=False),
        sa.Column("booking_ref", sa.String(length=100), nullable=False),
        sa.Column("amount_minor", sa.BigInteger(), nullable=False),
        sa.Column("move_in_date", sa.Date(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("status IN ('Due', 'Paid')", name="ck_bookings_status"),
        sa.CheckConstraint("amount_minor >= 0", name="ck_bookings_amount"),
        sa.ForeignKeyConstraint(["listing_id"], [f"{SCHEMA}.listings.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_ref"),
        schema=SCHEMA,
    )
    op.create_index("ix_bookings_listing_id", "bookings", ["listing_id"], schema=SCHEMA)
    op.create_index("ix_bookings_email", "bookings", ["email"], schema=SCHEMA)

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("listing_id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("images", JSON_TYPE, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        sa.ForeignKeyConstraint(["listing_id"], [f"{SCHEMA}.listings.id"]),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_reviews_listing_created", "reviews", ["listing_id", "created_at"], schema=SCHEMA
    )

    op.create_table(
        "visit_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_email", sa.String(length=255), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=True),
        sa.Column("listing_id", sa.Integer(), nullable=False),
        sa.Column("owner_email", sa.String(length=255), nullable=True),
        sa.Column("visit_date", sa.Date(), nullable=False),
        sa.Column("visit_time", sa.String(length=20), nullable=False),
        sa.Column(
            "status", sa.String(length=16), server_default=sa.text("'pending'"), nullable=False
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_visit_requests_status"
        ),
        sa.ForeignKeyConstraint(["listing_id"], [f"{SCHEMA}.listings.id"]),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_visit_requests_user_email", "visit_requests", ["user_email"], schema=SCHEMA
    )
    op.create_index(
        "ix_visit_requests_listing_id", "visit_requests", ["listing_id"], schema=SCHEMA
    )
    # At most one pending request per (user, listing)
    op.create_index(
        "uq_visit_requests_pending",
        "visit_requests",
        ["user_email", "listing_id"],
        unique=True,
        schema=SCHEMA,
        postgresql_where=PENDING_PREDICATE,
        sqlite_where=PENDING_PREDICATE,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_visit_requests_pending", table_name="visit_requests", schema=SCHEMA)
    op.drop_index("ix_visit_requests_listing_id", table_name="visit_requests", schema=SCHEMA)
    op.drop_index("ix_visit_requests_user_email", table_name="visit_requests", schema=SCHEMA)
    op.drop_table("visit_requests", schema=SCHEMA)
    op.drop_index("ix_reviews_listing_created", table_name="reviews", schema=SCHEMA)
    op.drop_table("reviews", schema=SCHEMA)
    op.drop_index("ix_bookings_email", table_name="bookings", schema=SCHEMA)
    op.drop_index("ix_bookings_listing_id", table_name="bookings", schema=SCHEMA)
    op.drop_table("bookings", schema=SCHEMA)
    op.drop_table("listings", schema=SCHEMA)
