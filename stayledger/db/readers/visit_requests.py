from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from stayledger.models.visit_requests import PENDING, VisitRequest


def _as_dict(row: Any) -> dict[str, Any]:
    return {key: row[key] for key in VisitRequest.__table__.columns.keys()}


def get_visit_request(conn: Connection, request_id: int) -> Optional[dict[str, Any]]:
    row = (
        conn.execute(select(VisitRequest).where(VisitRequest.id == request_id))
        .mappings()
        .fetchone()
    )
    return _as_dict(row) if row else None


def get_pending_visit_request(
    conn: Connection, user_email: str, listing_id: int
) -> Optional[dict[str, Any]]:
    """
    Fetch the pending request of a user for a listing.

    Returns:
        Optional[dict[str, Any]]: The single pending row, or None.
    """
    row = (
        conn.execute(
            select(VisitRequest)
            .where(VisitRequest.user_email == user_email)
            .where(VisitRequest.listing_id == listing_id)
            .where(VisitRequest.status == PENDING)
        )
        .mappings()
        .fetchone()
    )
    return _as_dict(row) if row else None


def list_visit_requests(
    conn: Connection,
    user_email: Optional[str] = None,
    listing_id: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    List visit requests of a user and/or a listing, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_email (Optional[str]): Filter by requester.
        listing_id (Optional[int]): Filter by listing.

    Returns:
        list[dict[str, Any]]: Visit request rows.
    """
    stmt = select(VisitRequest)
    if user_email is not None:
        stmt = stmt.where(VisitRequest.user_email == user_email)
    if listing_id is not None:
        stmt = stmt.where(VisitRequest.listing_id == listing_id)

    stmt = stmt.order_by(VisitRequest.created_at.desc(), VisitRequest.id.desc())
    return [_as_dict(row) for row in conn.execute(stmt).mappings()]
