"""
Notion API client used by every proxied route.

One httpx.AsyncClient per process, created in the app lifespan with the
bearer token and Notion-Version header baked in. Each call is bounded by a
fixed 10-second deadline covering connect, send and the full response body.

Contract:
  • 2xx responses come back as UpstreamResponse: raw bytes, never parsed.
  • Anything else (non-2xx, timeout, network failure) raises UpstreamError.
  • No retries; a failed call is surfaced immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import anyio
import httpx
from fastapi import Request

from notion_proxy.core.config import Settings
from notion_proxy.core.errors import UpstreamError

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT_SECONDS = 10.0

_DEFAULT_MEDIA_TYPE = "application/json"
_GENERIC_FAILURE = "An error occurred during the API request."


@dataclass(frozen=True, slots=True)
class UpstreamResponse:
    """A successful Notion response, relayed to the client as-is."""

    status_code: int
    content: bytes
    media_type: str = _DEFAULT_MEDIA_TYPE


def _segment(value: str) -> str:
    """Escape an id as exactly one path segment (no `/`, `?` or dot-segments)."""
    return quote(value, safe="").replace(".", "%2E")


def _error_from_response(response: httpx.Response) -> UpstreamError:
    """Pull Notion's message/code out of an error body, if it has one."""
    message: str | None = None
    code: str | None = None

    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if body.get("message"):
            message = str(body["message"])
        if body.get("code"):
            code = str(body["code"])

    return UpstreamError(
        message or f"Request failed with status code {response.status_code}",
        status_code=response.status_code,
        code=code,
    )


class NotionClient:
    """Thin async wrapper over the three Notion endpoints the proxy exposes."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    def from_settings(cls, settings: Settings) -> NotionClient:
        http = httpx.AsyncClient(
            base_url=settings.NOTION_BASE_URL,
            headers={
                "Authorization": f"Bearer {settings.NOTION_API_KEY}",
                "Content-Type": "application/json",
                "Notion-Version": settings.NOTION_API_VERSION,
            },
            timeout=UPSTREAM_TIMEOUT_SECONDS,
        )
        return cls(http)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Endpoints ───────────────────────────────────────────
    async def list_block_children(self, block_id: str) -> UpstreamResponse:
        return await self._request("GET", f"/blocks/{_segment(block_id)}/children")

    async def query_database(
        self, database_id: str, query: dict[str, Any],
    ) -> UpstreamResponse:
        path = f"/databases/{_segment(database_id)}/query"
        return await self._request("POST", path, json=query)

    async def create_page(self, payload: dict[str, Any]) -> UpstreamResponse:
        return await self._request("POST", "/pages", json=payload)

    # ── Transport ───────────────────────────────────────────
    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> UpstreamResponse:
        try:
            # httpx timeouts are per phase; this bounds the whole call
            with anyio.fail_after(UPSTREAM_TIMEOUT_SECONDS):
                response = await self._http.request(method, path, json=json)
        except (httpx.TimeoutException, TimeoutError) as exc:
            logger.error("Notion %s %s timed out: %r", method, path, exc)
            raise UpstreamError(
                str(exc) or f"timeout of {UPSTREAM_TIMEOUT_SECONDS:g}s exceeded",
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Notion %s %s failed: %r", method, path, exc)
            raise UpstreamError(str(exc) or _GENERIC_FAILURE) from exc

        if not response.is_success:
            logger.error(
                "Notion API error: %s %s status=%d body=%s",
                method,
                path,
                response.status_code,
                response.text[:500],
            )
            raise _error_from_response(response)

        media_type = response.headers.get("content-type", _DEFAULT_MEDIA_TYPE)
        return UpstreamResponse(response.status_code, response.content, media_type)


# ── Dependency ──────────────────────────────────────────────
def get_notion_client(request: Request) -> NotionClient:
    """The process-wide client opened in the app lifespan."""
    return request.app.state.notion
