"""
Test Configuration
==================

Pytest configuration with fixtures for settings, backends and the FastAPI
application. Every fixture runs against the in-memory mock backend.
"""

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ads_gateway.api.main import create_app
from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.config.settings import Settings, load_settings
from ads_gateway.core.backends.mock import MockAdsBackend
from ads_gateway.core.tools.dispatcher import ToolDispatcher

FACEBOOK_ENV_VARS = (
    "FACEBOOK_APP_ID",
    "FACEBOOK_APP_SECRET",
    "FACEBOOK_ACCESS_TOKEN",
    "FACEBOOK_ACCOUNT_ID",
)

# Short enough that streaming tests finish quickly
TEST_SSE_INTERVAL = 0.05


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove backend selection and credentials from the environment."""
    for name in FACEBOOK_ENV_VARS + ("ADS_BACKEND", "PORT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def test_settings(clean_env: pytest.MonkeyPatch) -> Settings:
    """Test settings fixture."""
    return load_settings(
        environment="testing",
        log_level="DEBUG",
        ads_backend="mock",
        sse_time_interval_seconds=TEST_SSE_INTERVAL,
        sse_heartbeat_interval_seconds=TEST_SSE_INTERVAL,
        sse_max_connections=5,
    )


@pytest.fixture
def live_settings(clean_env: pytest.MonkeyPatch) -> Settings:
    """Settings for the live backend with placeholder credentials."""
    return load_settings(
        environment="testing",
        ads_backend="live",
        facebook_app_id="1234567890",
        facebook_app_secret="test-secret",
        facebook_access_token="test-token",
        facebook_account_id="987654321",
    )


@pytest.fixture
def mock_backend() -> MockAdsBackend:
    """Seeded in-memory backend."""
    return MockAdsBackend()


@pytest.fixture
def dispatcher(mock_backend: MockAdsBackend) -> ToolDispatcher:
    return ToolDispatcher(mock_backend)


@pytest.fixture
def sse_manager() -> SSEConnectionManager:
    return SSEConnectionManager(max_connections=5)


@pytest.fixture
def app(test_settings: Settings, mock_backend: MockAdsBackend) -> FastAPI:
    """FastAPI application backed by the mock backend."""
    return create_app(test_settings, backend=mock_backend)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI test client."""
    with TestClient(app) as client:
        yield client
