"""
Alembic environment for the stayledger schema.

The database URL comes from DATABASE_URL (stayledger.config), never from
alembic.ini. Only objects in the ``stayledger`` schema are compared during
autogenerate; on SQLite the schema is dropped and batch mode is used so
ALTERs can be rendered.
"""

from logging.config import fileConfig
from typing import Any

from sqlalchemy import engine_from_config, pool
from sqlalchemy.schema import CreateSchema

from alembic import context  # type: ignore[attr-defined]
from stayledger.config import DATABASE_URL, SCHEMA
from stayledger.models.base import Base
from stayledger.models.bookings import Booking  # noqa: F401
from stayledger.models.listings import Listing  # noqa: F401
from stayledger.models.reviews import Review  # noqa: F401
from stayledger.models.visit_requests import VisitRequest  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

IS_SQLITE = DATABASE_URL.startswith("sqlite")


def include_object(
    object_: Any,
    name: str,
    type_: str,
    reflected: bool,
    compare_to: Any,
) -> bool:
    """Skip tables that belong to other services sharing the database."""
    if IS_SQLITE:
        return True
    schema = getattr(object_, "schema", None)
    return schema is None or schema == SCHEMA


def _context_options() -> dict[str, Any]:
    """Options shared by offline and online runs."""
    if IS_SQLITE:
        return {
            "target_metadata": Base.metadata,
            "render_as_batch": True,
            "compare_type": True,
        }
    return {
        "target_metadata": Base.metadata,
        "include_schemas": True,
        "include_object": include_object,
        "version_table_schema": SCHEMA,
        "compare_type": True,
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    if IS_SQLITE:
        connectable = connectable.execution_options(schema_translate_map={SCHEMA: None})

    with connectable.connect() as connection:
        if not IS_SQLITE:
            # The version table lives in the service schema, so it must exist first
            connection.execute(CreateSchema(SCHEMA, if_not_exists=True))
            connection.commit()

        context.configure(connection=connection, **_context_options())

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
