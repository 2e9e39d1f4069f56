"""Shared test configuration, fixtures and pytest markers."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_completion_client
from api.router import limiter
from main import app
from services.pipeline.client_registry import clear as clear_registry
from tests.fakes import FakeCompletionClient, make_config


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "live: calls a real LLM provider (needs API key, costs quota)"
    )


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Clear the client registry and rate-limit counters around each test."""
    clear_registry()
    limiter.reset()
    yield
    clear_registry()
    limiter.reset()


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def api(fake_client):
    """TestClient wired to the fake completion client and a test config."""
    original = app.state.pipeline_config
    app.state.pipeline_config = make_config()
    app.dependency_overrides[get_completion_client] = lambda: fake_client
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
        app.state.pipeline_config = original
