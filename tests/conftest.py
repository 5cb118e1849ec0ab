"""
Global pytest fixtures for the Shortlink test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory Storage fixture for direct testing
    - Provide a LinkManager fixture wired to the Storage fixture

Why an app factory?
    Using `create_app()` ensures each test gets fresh in-memory state,
    eliminating cross-test flakiness.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink.config import load_settings
from shortlink.manager.link_manager import LinkManager
from shortlink.storage.storage import Storage


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def manager(storage: Storage) -> LinkManager:
    """Provide a LinkManager wired to the storage fixture, without a base URL."""
    return LinkManager(storage=storage)


@pytest.fixture
def make_client(storage, monkeypatch):
    """
    Build a TestClient around the shared `storage` fixture.

    Keyword arguments become SHORTLINK_* environment variables before the
    settings are read, e.g. make_client(RESPONSE_SHAPE="id").
    """
    def _make(store=None, **env) -> TestClient:
        for key, value in env.items():
            monkeypatch.setenv(f"SHORTLINK_{key}", str(value))
        app = create_app(storage=store if store is not None else storage, settings=load_settings())
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, monkeypatch) -> TestClient:
    """
    Provide a fresh TestClient with default settings: bare-id short links,
    HTML anchor responses and 302 redirects.
    """
    for name in ("URL_BASE", "RESPONSE_SHAPE", "PERMANENT_REDIRECT", "CODE_STRATEGY", "CODE_LENGTH"):
        monkeypatch.delenv(f"SHORTLINK_{name}", raising=False)
    return make_client()
