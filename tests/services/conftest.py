# tests/services/conftest.py
from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from orangeslice.services.api.app import create_app
from orangeslice.services.api.deps import get_authenticator
from orangeslice.services.context import AppContext


@pytest.fixture()
def ctx(settings, fake_auth) -> AppContext:
    """A started AppContext over its own in-memory database."""
    context = AppContext.create(settings, authenticator=fake_auth).start()
    try:
        yield context
    finally:
        context.close()


@pytest.fixture()
def api_client(ctx, fake_auth):
    """
    TestClient over an app that shares the test's AppContext, so a test can
    write through the API and inspect ctx (mirror, status log, editors) directly.
    """
    app = create_app(ctx)
    app.dependency_overrides[get_authenticator] = lambda: fake_auth
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
