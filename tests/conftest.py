"""
Pytest fixtures for the proxy. Notion is never contacted: outbound httpx
calls are intercepted with respx.
"""

from __future__ import annotations

import pytest
import respx
from fastapi.testclient import TestClient

from notion_proxy.core.config import Settings
from notion_proxy.main import create_app

NOTION_BASE_URL = "https://api.notion.com/v1"
NOTION_API_KEY = "secret_notion_test"
PROXY_API_KEY = "proxy-test-key"


@pytest.fixture
def make_settings():
    """Factory for Settings that ignores any developer .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "NOTION_API_KEY": NOTION_API_KEY,
            "PROXY_API_KEY": PROXY_API_KEY,
            "NOTION_BASE_URL": NOTION_BASE_URL,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def notion_mock():
    """respx router scoped to the Notion base URL."""
    with respx.mock(base_url=NOTION_BASE_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client(settings, notion_mock):
    """TestClient with auth enabled. Server errors come back as responses."""
    with TestClient(create_app(settings), raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-Proxy-API-Key": PROXY_API_KEY}
