"""
Gatekeeper tests: 401 for a missing key, 403 for a wrong key, open
access when no key is configured, and /health always reachable.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from notion_proxy.main import create_app

PROTECTED = [
    ("GET", "/blocks/block-1/children", None),
    ("POST", "/query-database/db-1", {"filter": {"property": "Name"}}),
    ("POST", "/insert-record/db-1", {"Term": "Foo", "Definition": "Bar", "Category": "General"}),
]


@pytest.mark.parametrize(("method", "path", "body"), PROTECTED)
def test_missing_key_is_unauthorized(client, notion_mock, method, path, body):
    response = client.request(method, path, json=body)

    assert response.status_code == 401
    assert response.json() == {
        "error": "Unauthorized",
        "details": "Missing X-Proxy-API-Key header.",
        "status": 401,
    }
    assert not notion_mock.calls


@pytest.mark.parametrize(("method", "path", "body"), PROTECTED)
def test_wrong_key_is_forbidden(client, notion_mock, method, path, body):
    response = client.request(
        method, path, json=body, headers={"X-Proxy-API-Key": "not-the-key"},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"
    assert response.json()["status"] == 403
    assert not notion_mock.calls


def test_empty_key_counts_as_missing(client):
    response = client.get("/blocks/block-1/children", headers={"X-Proxy-API-Key": ""})
    assert response.status_code == 401


def test_header_name_is_case_insensitive(client, notion_mock):
    notion_mock.get("/blocks/block-1/children").mock(
        return_value=httpx.Response(200, json={"results": []}),
    )

    response = client.get(
        "/blocks/block-1/children", headers={"x-proxy-api-key": "proxy-test-key"},
    )
    assert response.status_code == 200


def test_correct_key_reaches_handler(client, notion_mock, auth_headers):
    route = notion_mock.get("/blocks/block-1/children").mock(
        return_value=httpx.Response(200, json={"results": []}),
    )

    response = client.get("/blocks/block-1/children", headers=auth_headers)

    assert response.status_code == 200
    assert route.called


def test_custom_header_name(make_settings, notion_mock):
    settings = make_settings(PROXY_API_KEY_HEADER="X-Relay-Token")
    notion_mock.get("/blocks/block-1/children").mock(
        return_value=httpx.Response(200, json={"results": []}),
    )

    with TestClient(create_app(settings)) as client:
        missing = client.get("/blocks/block-1/children")
        ok = client.get("/blocks/block-1/children", headers={"X-Relay-Token": "proxy-test-key"})

    assert missing.json()["details"] == "Missing X-Relay-Token header."
    assert ok.status_code == 200


@pytest.mark.parametrize("proxy_key", [None, ""])
def test_no_key_configured_never_rejects(make_settings, notion_mock, proxy_key):
    settings = make_settings(PROXY_API_KEY=proxy_key)
    notion_mock.get("/blocks/block-1/children").mock(
        return_value=httpx.Response(200, json={"results": []}),
    )

    assert not settings.auth_enabled
    with TestClient(create_app(settings)) as client:
        bare = client.get("/blocks/block-1/children")
        junk = client.get("/blocks/block-1/children", headers={"X-Proxy-API-Key": "junk"})

    assert bare.status_code == 200
    assert junk.status_code == 200


@pytest.mark.parametrize(
    "headers",
    [{}, {"X-Proxy-API-Key": "wrong"}, {"X-Proxy-API-Key": "proxy-test-key"}],
)
def test_health_ignores_auth(client, headers):
    response = client.get("/health", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")


@pytest.mark.parametrize("path", ["/query-database/db-1", "/insert-record/db-1"])
@pytest.mark.parametrize(
    ("headers", "status_code", "label"),
    [
        ({}, 401, "Unauthorized"),
        ({"X-Proxy-API-Key": "not-the-key"}, 403, "Forbidden"),
    ],
)
def test_key_checked_before_body_is_parsed(client, notion_mock, path, headers, status_code, label):
    response = client.post(
        path,
        content=b'{"filter": ',
        headers={**headers, "content-type": "application/json"},
    )

    assert response.status_code == status_code
    assert response.json()["error"] == label
    assert "JSON" not in response.json()["details"]
    assert not notion_mock.calls
