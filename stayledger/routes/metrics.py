"""Prometheus scrape endpoint."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response, include_in_schema=False)
def metrics() -> Response:
    """
    Expose every collector in the default registry in text format.

    Counters are per process; with several uvicorn workers each one is
    scraped separately.

    Example:
        >>> GET /metrics
        # TYPE stayledger_inventory_operations_total counter
        stayledger_inventory_operations_total{operation="reserve",outcome="committed"} 3.0
    """
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
