"""
Dialect-aware INSERT ... ON CONFLICT DO UPDATE helper.

PostgreSQL and SQLite both support ON CONFLICT, including conflict targets on
partial unique indexes, but SQLAlchemy exposes each through its own dialect
``insert`` construct. This helper picks the right one for the connection so
writers stay backend-neutral.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import ColumnElement


def dialect_insert(conn: Connection, table: type) -> Any:
    """
    Return the dialect-specific insert() construct for ``table``.

    Raises:
        NotImplementedError: For dialects without ON CONFLICT support
    """
    if conn.dialect.name == "postgresql":
        return postgresql.insert(table)
    if conn.dialect.name == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"ON CONFLICT upsert not supported on {conn.dialect.name}")


def upsert_on_conflict(
    conn: Connection,
    table: type,
    row: dict[str, Any],
    conflict_columns: list[str],
    update_columns: list[str],
    index_where: Optional[ColumnElement[Any]] = None,
) -> None:
    """
    Insert ``row`` or, when it collides on ``conflict_columns``, update it in place.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM table class (e.g., VisitRequest)
        row: Column values to insert
        conflict_columns: Columns of the unique index that defines the conflict
        update_columns: Columns copied from the proposed row on conflict
        index_where: Predicate of a partial unique index, repeated verbatim

    Example:
        >>> with engine.begin() as conn:
        ...     upsert_on_conflict(
        ...         conn=conn,
        ...         table=VisitRequest,
        ...         row={"user_email": "a@b.c", "listing_id": 1, ...},
        ...         conflict_columns=["user_email", "listing_id"],
        ...         update_columns=["visit_date", "visit_time", "updated_at"],
        ...         index_where=PENDING_PREDICATE,
        ...     )

    Technical Details:
        - Single statement, so the check and the write cannot interleave
          with a concurrent insert for the same key
        - The unique index (not application code) enforces uniqueness
    """
    stmt = dialect_insert(conn, table).values(row)

    set_dict = {col: getattr(stmt.excluded, col) for col in update_columns}

    stmt = stmt.on_conflict_do_update(
        index_elements=conflict_columns,
        index_where=index_where,
        set_=set_dict,
    )

    conn.execute(stmt)
