"""
SQLAlchemy engine with production-ready connection pooling.

This module creates the engine instance once at process start. The pool
capacity (DB_POOL_SIZE + DB_MAX_OVERFLOW) is the upper bound on how many
requests can hold a transaction concurrently. The engine is handed to each
core component at construction (see stayledger.dependencies) and disposed on
application shutdown.

A ``sqlite://`` URL is accepted for local development and the test suite: the
PostgreSQL schema is translated away and an in-memory database is shared
through a single static connection.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from sqlalchemy import create_engine, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from stayledger.config import (
    DATABASE_URL,
    DB_MAX_OVERFLOW,
    DB_POOL_SIZE,
    OPERATION_TIMEOUT_MS,
    SCHEMA,
)
from stayledger.errors import PersistenceFailure
from stayledger.metrics import transaction_duration
from stayledger.models.listings import Listing

logger = structlog.get_logger(__name__)

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def create_db_engine(url: str) -> Engine:
    """
    Build an engine for the given database URL.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: Configured engine (pooled for PostgreSQL, schema-less for SQLite)
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, future=True, **kwargs)
        return sqlite_engine.execution_options(schema_translate_map={SCHEMA: None})

    return create_engine(
        url,
        future=True,
        # Connection pool settings
        pool_size=DB_POOL_SIZE,  # Number of connections to maintain in the pool
        max_overflow=DB_MAX_OVERFLOW,  # Additional connections when pool is exhausted
        pool_pre_ping=True,  # Verify connections before using (detect stale connections)
        pool_recycle=3600,  # Recycle connections after 1 hour
        echo=False,
    )


engine: Engine = create_db_engine(DATABASE_URL)


def _apply_timeouts(conn: Connection) -> None:
    """Bound lock waits and statement runtime for the current transaction."""
    if conn.dialect.name != "postgresql":
        return
    timeout_ms = int(OPERATION_TIMEOUT_MS)
    conn.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
    conn.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))


@contextmanager
def transaction(
    db_engine: Engine, operation: str, conn: Optional[Connection] = None
) -> Iterator[Connection]:
    """
    Run a block inside one database transaction.

    When ``conn`` is given the block joins the caller's transaction and the
    caller owns commit/rollback. Otherwise a new transaction is opened with
    per-transaction timeouts; it commits when the block exits cleanly and
    rolls back on any exception. Storage errors (including timeouts) are
    raised as PersistenceFailure after the rollback.

    Args:
        db_engine: Engine to open the transaction on
        operation: Name used for logging and the duration metric
        conn: Optional connection of an enclosing transaction

    Yields:
        Connection: Connection bound to the active transaction

    Example:
        >>> with transaction(engine, "reserve") as conn:
        ...     conn.execute(...)
    """
    if conn is not None:
        yield conn
        return

    start = time.perf_counter()
    try:
        with db_engine.begin() as new_conn:
            _apply_timeouts(new_conn)
            yield new_conn
    except SQLAlchemyError as e:
        logger.error("transaction_failed", operation=operation, error=str(e))
        raise PersistenceFailure(f"{operation} failed: storage error") from e
    finally:
        transaction_duration.labels(operation=operation).observe(time.perf_counter() - start)


def check_engine_health() -> bool:
    """
    Check if database engine is healthy and connections are working.

    This function is used by the /ready endpoint to verify database
    connectivity before allowing traffic to the service.

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def check_schema_ready() -> bool:
    """
    Check that the core tables exist (migrations have been applied).

    Returns:
        bool: True if the listings table can be queried
    """
    try:
        with engine.connect() as conn:
            conn.execute(select(Listing.id).limit(1))
        return True
    except Exception:
        return False
