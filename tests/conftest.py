# tests/conftest.py
from __future__ import annotations

from typing import Dict, List, Optional

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from orangeslice.common.settings import CatalogConfig, DBConfig, FeatureFlags, Settings
from orangeslice.database.core.main import Base, build_engine, build_session_factory
from orangeslice.domain.ports.auth import CurrentUser
from orangeslice.services.gateway.sqlalchemy_gateway import SqlAlchemyDataGateway

# No container here: every test gets a private in-memory SQLite database
# built from the models (alembic is exercised in tests/database/test_alembic_migrations.py).
SQLITE_MEMORY = "sqlite+pysqlite:///:memory:"

ADMIN_TOKEN = "good-token"
ADMIN_USER = CurrentUser(username="ada", email="ada@example.com")


class FakeAuthenticator:
    """AuthenticatorPort stand-in: one known token, records sign-outs."""

    def __init__(self, users: Optional[Dict[str, CurrentUser]] = None) -> None:
        self.users = dict(users or {ADMIN_TOKEN: ADMIN_USER})
        self.signed_out: List[str] = []

    def current_user(self, token: str) -> Optional[CurrentUser]:
        return self.users.get(token)

    def sign_out(self, token: str) -> None:
        self.signed_out.append(token)
        self.users.pop(token, None)


def make_settings(**features) -> Settings:
    return Settings(
        app_env="test",
        db=DBConfig(url=SQLITE_MEMORY, create_all=True),
        catalog=CatalogConfig(placeholder_image_url="https://img.test/placeholder.png", resubscribe_interval_sec=5.0),
        features=FeatureFlags(**{"seed_default_tags": False, "mirror_enabled": True, **features}),
    )


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def db_engine(settings) -> Engine:
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def sessions(db_engine) -> sessionmaker[Session]:
    return build_session_factory(db_engine)


@pytest.fixture()
def db(sessions) -> Session:
    """Per-test session; rolled back at the end."""
    session = sessions()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def gateway(sessions) -> SqlAlchemyDataGateway:
    gw = SqlAlchemyDataGateway(sessions)
    try:
        yield gw
    finally:
        gw.close()


@pytest.fixture()
def make_tags(gateway):
    """Create tags by name; returns {name: Tag}."""
    def _make(*names: str):
        created = gateway.tags.create_many([{"name": n, "color": "#000000"} for n in names])
        return {t.name: t for t in created}
    return _make


@pytest.fixture()
def settings_factory():
    return make_settings


@pytest.fixture()
def fake_auth() -> FakeAuthenticator:
    return FakeAuthenticator()


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
