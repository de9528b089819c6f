# orangeslice/database/alembic/env.py
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool, text
from sqlalchemy.engine import Connection

# --- Load app settings --------------------------------------------------------
# This import must work without importing the whole app graph (keep it light).
from orangeslice.common.settings import get_settings
from orangeslice.database.models import Base  # imports every model onto the metadata

cfg = get_settings()

# --- Alembic Config -----------------------------------------------------------
alembic_config = context.config

# If alembic.ini has a loggers section, set it up.
if alembic_config.config_file_name is not None and alembic_config.attributes.get("configure_logger", True):
    fileConfig(alembic_config.config_file_name, disable_existing_loggers=False)

# An explicit sqlalchemy.url (tests, CLI -x overrides) wins over the environment and Settings.
database_url = (
    alembic_config.get_main_option("sqlalchemy.url")
    or os.getenv("DATABASE_URL")
    or cfg.database_url
)
is_sqlite = database_url.startswith("sqlite")

target_metadata = Base.metadata

include_schemas = not is_sqlite
version_table_schema = None if is_sqlite else (cfg.alembic_version_table_schema or cfg.db.schema_name)


def include_object(object, name, type_, reflected, compare_to):
    """Limit autogenerate to our schema (but still allow the version table schema)."""
    obj_schema = getattr(object, "schema", None)
    if type_ == "table":
        if obj_schema is None:
            # tables created without explicit schema are resolved through search_path
            return True
        return obj_schema in {cfg.db.schema_name, version_table_schema}
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (no DB connection)."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=include_schemas,
        include_object=include_object,
        version_table_schema=version_table_schema,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def _prepare_connection(conn: Connection) -> None:
    """Ensure the app schema exists and comes first in search_path (Postgres only)."""
    if is_sqlite:
        return
    schema = cfg.db.schema_name
    conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
    conn.execute(text(f'SET search_path TO "{schema}", public'))
    conn.commit()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (with an Engine/Connection)."""
    connectable = create_engine(
        database_url,
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        _prepare_connection(connection)

        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=include_schemas,
            include_object=include_object,
            version_table_schema=version_table_schema,
            compare_type=True,
            compare_server_default=not is_sqlite,
            render_as_batch=is_sqlite,  # SQLite needs batch mode for ALTER
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


# Entrypoint selected by Alembic
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
