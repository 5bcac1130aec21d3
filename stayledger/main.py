# stayledger/main.py

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stayledger.config import ALLOWED_ORIGINS
from stayledger.errors import StayLedgerError
from stayledger.logging_config import setup_logging
from stayledger.middleware import RequestIDMiddleware
from stayledger.routes.bookings import router as bookings_router
from stayledger.routes.health import router as health_router
from stayledger.routes.listings import router as listings_router
from stayledger.routes.metrics import router as metrics_router
from stayledger.routes.users import router as users_router
from stayledger.routes.visit_requests import router as visit_requests_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="StayLedger API",
    description="Room inventory, bookings, ratings and visit requests for stay listings",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(bookings_router, tags=["Bookings"])
app.include_router(listings_router, tags=["Listings"])
app.include_router(visit_requests_router, tags=["Visit Requests"])
app.include_router(users_router, tags=["Users"])


@app.exception_handler(StayLedgerError)
async def stayledger_error_handler(request: Request, exc: StayLedgerError) -> JSONResponse:
    """Map a core failure to its status code with an ``{"error", "detail"}`` body."""
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.tag, detail=exc.detail)
    else:
        logger.info("request_rejected", path=request.url.path, error=exc.tag, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed bodies and parameters with 400 before they reach the core."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
def startup_event() -> None:
    """Initialize application on startup."""
    from stayledger.db.engine import check_engine_health

    logger.info("FastAPI application starting up...")

    if not check_engine_health():
        logger.warning("database_unreachable_at_startup")

    logger.info("FastAPI application initialized")


@app.on_event("shutdown")
def shutdown_event() -> None:
    """Release pooled database connections."""
    from stayledger.db.engine import engine

    engine.dispose()
    logger.info("FastAPI application shut down")
