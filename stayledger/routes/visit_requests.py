"""Visit request routes: request, approve, reject and list viewings."""

from typing import Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from stayledger.dependencies import get_notifier, get_visit_registry
from stayledger.errors import StayLedgerError, ValidationError
from stayledger.schemas.visit_requests import VisitRequestPayload, VisitRequestRecord
from stayledger.services.notifications import Notifier
from stayledger.services.visit_requests import VisitRequestRegistry

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/visit-request",
    status_code=status.HTTP_201_CREATED,
    response_model=VisitRequestRecord,
)
def request_visit(
    payload: VisitRequestPayload,
    background_tasks: BackgroundTasks,
    registry: VisitRequestRegistry = Depends(get_visit_registry),
    notifier: Notifier = Depends(get_notifier),
) -> VisitRequestRecord:
    """
    Request a viewing. A pending request for the same user and listing is
    rescheduled in place instead of duplicated.

    Returns:
        VisitRequestRecord: The pending request
    """
    try:
        record, rescheduled = registry.request_visit(
            user_email=payload.user_email,
            user_name=payload.user_name,
            listing_id=payload.listing_id,
            owner_email=payload.owner_email,
            visit_date=payload.visit_date,
            visit_time=payload.visit_time,
        )
    except StayLedgerError:
        raise
    except Exception as e:
        logger.exception("visit_request_failed", listing_id=payload.listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    background_tasks.add_task(notifier.visit_requested, record, rescheduled)
    return record


@router.put("/visit-request/{request_id}/approve", response_model=VisitRequestRecord)
def approve_visit(
    request_id: int,
    background_tasks: BackgroundTasks,
    registry: VisitRequestRegistry = Depends(get_visit_registry),
    notifier: Notifier = Depends(get_notifier),
) -> VisitRequestRecord:
    record = registry.approve(request_id)
    background_tasks.add_task(notifier.visit_decided, record)
    return record


@router.put("/visit-request/{request_id}/reject", response_model=VisitRequestRecord)
def reject_visit(
    request_id: int,
    background_tasks: BackgroundTasks,
    registry: VisitRequestRegistry = Depends(get_visit_registry),
    notifier: Notifier = Depends(get_notifier),
) -> VisitRequestRecord:
    record = registry.reject(request_id)
    background_tasks.add_task(notifier.visit_decided, record)
    return record


@router.get("/visit-requests", response_model=list[VisitRequestRecord])
def list_visit_requests(
    user_email: Optional[str] = Query(None, alias="userEmail"),
    listing_id: Optional[int] = Query(None, alias="listingId"),
    registry: VisitRequestRegistry = Depends(get_visit_registry),
) -> list[VisitRequestRecord]:
    """
    List visit requests of a user or of a listing, newest first.

    Exactly one of ``userEmail`` and ``listingId`` must be given.
    """
    if (user_email is None) == (listing_id is None):
        raise ValidationError("Provide exactly one of userEmail or listingId")

    if user_email is not None:
        return registry.list_for_user(user_email)
    return registry.list_for_listing(listing_id)  # type: ignore[arg-type]
