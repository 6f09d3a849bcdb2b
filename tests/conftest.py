# tests/conftest.py
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from minijwt.config import Settings, get_settings
from minijwt.main import app
from minijwt.middleware import rate_limit

SECRET = "supersecret"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    TestClient with no dependency overrides and an empty rate-limit window,
    so tests cannot leak configuration or request counts into each other.
    """
    app.dependency_overrides = {}
    rate_limit._inmem.clear()

    yield TestClient(app)

    app.dependency_overrides = {}
    rate_limit._inmem.clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(JWT_SECRET=SECRET, ENABLE_DEBUG_ROUTES=True, REDIS_URL=None)


@pytest.fixture
def configured_client(client: TestClient, settings: Settings) -> TestClient:
    app.dependency_overrides[get_settings] = lambda: settings
    return client
