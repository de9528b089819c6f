# orangeslice/database/core/main.py
from __future__ import annotations

from typing import List

from sqlalchemy import MetaData, create_engine, event, Column, Table
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from orangeslice.common.settings import Settings, get_settings

_settings = get_settings()

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

_serviceobject_first = ("id", "date_created", "last_updated", "data_origin", "meta_data")

class Base(DeclarativeBase):
    # Set a default schema to keep DDL/Autogenerate explicit and consistent
    metadata = MetaData(
        schema=_settings.db_schema,
        naming_convention=NAMING_CONVENTION,
    )

    @classmethod
    def __table_cls__(cls, *args, **kw):
        """Reorder columns so ServiceObject fields come first."""
        if not args:
            return super().__table_cls__(*args, **kw)

        # Positional args are (name, metadata, *columns_and_constraints)
        name, metadata, *rest = args

        cols: List[Column] = [x for x in rest if isinstance(x, Column)]
        others = [x for x in rest if not isinstance(x, Column)]

        # Stable ordering: ServiceObject fields first, then everything else in their original order
        priority = {n: i for i, n in enumerate(_serviceobject_first)}
        original_index = {c: i for i, c in enumerate(cols)}

        cols.sort(key=lambda c: (priority.get(c.name, 10_000), original_index[c]))

        return Table(name, metadata, *(cols + others), **kw)


def build_engine(settings: Settings) -> Engine:
    """
    Engine for the configured database. Postgres gets the pooled setup;
    SQLite (dev/test) gets foreign keys enforced and, for :memory:, a single
    shared connection so every thread sees the same database.
    """
    url = settings.database_url
    if settings.db.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=settings.db.echo, future=True, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

        return engine

    engine = create_engine(
        url,
        echo=settings.db.echo,
        pool_size=settings.db.pool_size,
        max_overflow=settings.db.max_overflow,
        pool_pre_ping=settings.db.pool_pre_ping,
        pool_recycle=settings.db.pool_recycle,
        future=True,
    )

    # Ensure the app schema is first, then public (so extensions remain visible)
    schema = settings.db_schema
    if schema:
        @event.listens_for(engine, "connect")
        def _set_search_path(dbapi_conn, _):
            with dbapi_conn.cursor() as cur:
                cur.execute(f'SET search_path TO "{schema}", public')

    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, future=True, autoflush=False)

