"""
Visit request registry.

State machine::

    pending --approve--> approved   (terminal)
    pending --reject---> rejected   (terminal)

At most one pending request exists per (user_email, listing_id). Requesting
again while one is pending reschedules it in place; the partial unique index
plus ON CONFLICT makes that a single atomic statement.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from stayledger.db.engine import transaction
from stayledger.db.readers.listings import get_listing
from stayledger.db.readers.visit_requests import (
    get_pending_visit_request,
    get_visit_request,
    list_visit_requests,
)
from stayledger.db.writers.visit_requests import (
    set_visit_request_status,
    upsert_pending_visit_request,
)
from stayledger.errors import (
    InvalidTransition,
    ListingNotFound,
    ValidationError,
    VisitRequestNotFound,
)
from stayledger.metrics import visit_requests_total
from stayledger.models.visit_requests import APPROVED, PENDING, REJECTED
from stayledger.schemas.visit_requests import VisitRequestRecord

logger = structlog.get_logger(__name__)


class VisitRequestRegistry:
    """
    Track scheduling requests and their pending/approved/rejected state.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def request_visit(
        self,
        user_email: str,
        user_name: Optional[str],
        listing_id: int,
        owner_email: Optional[str],
        visit_date: date,
        visit_time: str,
    ) -> tuple[VisitRequestRecord, bool]:
        """
        Create a pending visit request, or reschedule the pending one.

        Args:
            user_email: Requester email
            user_name: Requester name
            listing_id: Listing to visit
            owner_email: Owner to notify; defaults to the listing's owner
            visit_date: Requested date
            visit_time: Requested time slot

        Returns:
            tuple[VisitRequestRecord, bool]: The pending request and whether
            an existing request was rescheduled (False means newly created)

        Raises:
            ValidationError: Missing email or time
            ListingNotFound: Listing does not exist
        """
        if not user_email or not user_email.strip():
            raise ValidationError("userEmail is required")
        if not visit_time or not visit_time.strip():
            raise ValidationError("visitTime is required")

        with transaction(self.engine, "request_visit") as conn:
            listing = get_listing(conn, listing_id)
            if listing is None:
                raise ListingNotFound(f"Listing {listing_id} not found")

            rescheduled = get_pending_visit_request(conn, user_email, listing_id) is not None
            upsert_pending_visit_request(
                conn,
                user_email=user_email,
                user_name=user_name,
                listing_id=listing_id,
                owner_email=owner_email or listing["owner_email"],
                visit_date=visit_date,
                visit_time=visit_time,
            )
            row = get_pending_visit_request(conn, user_email, listing_id)

        action = "rescheduled" if rescheduled else "created"
        visit_requests_total.labels(action=action).inc()
        logger.info(
            f"visit_request_{action}",
            request_id=row["id"],
            listing_id=listing_id,
            visit_date=str(visit_date),
            visit_time=visit_time,
        )
        return VisitRequestRecord.model_validate(row), rescheduled

    def approve(self, request_id: int) -> VisitRequestRecord:
        """
        Approve a pending request. Re-approving is a no-op success.

        Raises:
            VisitRequestNotFound: No such request
            InvalidTransition: Request was already rejected
        """
        return self._transition(request_id, APPROVED)

    def reject(self, request_id: int) -> VisitRequestRecord:
        """
        Reject a pending request. Re-rejecting is a no-op success.

        Raises:
            VisitRequestNotFound: No such request
            InvalidTransition: Request was already approved
        """
        return self._transition(request_id, REJECTED)

    def get(self, request_id: int) -> VisitRequestRecord:
        with self.engine.connect() as conn:
            row = get_visit_request(conn, request_id)
        if row is None:
            raise VisitRequestNotFound(f"Visit request {request_id} not found")
        return VisitRequestRecord.model_validate(row)

    def list_for_user(self, user_email: str) -> list[VisitRequestRecord]:
        """Requests made by ``user_email``, newest first."""
        with self.engine.connect() as conn:
            rows = list_visit_requests(conn, user_email=user_email)
        return [VisitRequestRecord.model_validate(row) for row in rows]

    def list_for_listing(self, listing_id: int) -> list[VisitRequestRecord]:
        """Requests for ``listing_id``, newest first."""
        with self.engine.connect() as conn:
            rows = list_visit_requests(conn, listing_id=listing_id)
        return [VisitRequestRecord.model_validate(row) for row in rows]

    def _transition(self, request_id: int, status: str) -> VisitRequestRecord:
        with transaction(self.engine, f"visit_request_{status}") as conn:
            changed = set_visit_request_status(
                conn, request_id, status, from_statuses=(PENDING, status)
            )
            row = get_visit_request(conn, request_id)
            if row is None:
                raise VisitRequestNotFound(f"Visit request {request_id} not found")
            if not changed:
                raise InvalidTransition(
                    f"Visit request {request_id} is already {row['status']}",
                    current_status=row["status"],
                )

        visit_requests_total.labels(action=status).inc()
        logger.info("visit_request_decided", request_id=request_id, status=status)
        return VisitRequestRecord.model_validate(row)
