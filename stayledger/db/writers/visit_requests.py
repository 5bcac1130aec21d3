from datetime import date
from typing import Optional

import structlog
from sqlalchemy import update
from sqlalchemy.engine import Connection

from stayledger.db.writers._upsert import upsert_on_conflict
from stayledger.models.visit_requests import PENDING, PENDING_PREDICATE, VisitRequest
from stayledger.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def upsert_pending_visit_request(
    conn: Connection,
    user_email: str,
    user_name: Optional[str],
    listing_id: int,
    owner_email: Optional[str],
    visit_date: date,
    visit_time: str,
) -> None:
    """
    Create the pending request for (user_email, listing_id) or reschedule it.

    The conflict target is the partial unique index over pending rows, so an
    existing pending request is updated in place and approved/rejected rows
    are never touched.

    Args:
        conn (Connection): SQLAlchemy DB connection (within transaction).
        user_email (str): Requester email.
        user_name (Optional[str]): Requester name.
        listing_id (int): Listing to visit.
        owner_email (Optional[str]): Listing owner to notify.
        visit_date (date): Requested date.
        visit_time (str): Requested time slot.
    """
    now = utc_now()

    upsert_on_conflict(
        conn=conn,
        table=VisitRequest,
        row={
            "user_email": user_email,
            "user_name": user_name,
            "listing_id": listing_id,
            "owner_email": owner_email,
            "visit_date": visit_date,
            "visit_time": visit_time,
            "status": PENDING,
            "created_at": now,
            "updated_at": now,
        },
        conflict_columns=["user_email", "listing_id"],
        update_columns=["user_name", "owner_email", "visit_date", "visit_time", "updated_at"],
        index_where=PENDING_PREDICATE,
    )


def set_visit_request_status(
    conn: Connection, request_id: int, status: str, from_statuses: tuple[str, ...]
) -> bool:
    """
    Move a visit request to ``status`` if it is currently in one of ``from_statuses``.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        request_id (int): Visit request ID.
        status (str): Target status.
        from_statuses (tuple[str, ...]): Statuses the transition is allowed from.

    Returns:
        bool: True if the row was updated.
    """
    stmt = (
        update(VisitRequest)
        .where(VisitRequest.id == request_id)
        .where(VisitRequest.status.in_(from_statuses))
        .values(status=status, updated_at=utc_now())
    )
    result = conn.execute(stmt)

    if result.rowcount == 1:
        logger.debug("visit_request_status_set", request_id=request_id, status=status)
    return result.rowcount == 1
