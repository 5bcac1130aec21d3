"""
Liveness and readiness checks.

``/health`` only reports that the process is serving requests. ``/ready``
also verifies that the database answers and that the inventory tables exist,
so traffic is withheld from an instance whose migrations have not run.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stayledger.db.engine import check_engine_health, check_schema_ready

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness check endpoint.

    Example:
        >>> GET /health
        {"status": "ok"}
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check() -> JSONResponse:
    """
    Readiness check endpoint.

    Returns 200 with per-check results when the database is reachable and
    migrated, 503 otherwise.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok", "schema": "ok"}}
    """
    checks = {"database": "ok" if check_engine_health() else "failed"}
    checks["schema"] = (
        "ok" if checks["database"] == "ok" and check_schema_ready() else "failed"
    )

    if all(result == "ok" for result in checks.values()):
        return JSONResponse(content={"status": "ready", "checks": checks})

    logger.error("readiness_check_failed", checks=checks)
    return JSONResponse(status_code=503, content={"status": "not ready", "checks": checks})
