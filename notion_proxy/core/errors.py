"""
Error taxonomy for the proxy.

Every failure a handler can produce is one of these. The exception
handlers in notion_proxy.core.normalizer turn them into the JSON envelope:

    {"error": <label>, "details": <message>, "status": <http status>}
"""

from __future__ import annotations

from fastapi import status


class ProxyError(Exception):
    """Base class carrying the HTTP status and envelope label."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    label: str = "Internal Server Error"

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details


class BadRequest(ProxyError):
    """Missing or malformed client input."""

    status_code = status.HTTP_400_BAD_REQUEST
    label = "Bad Request"


class Unauthorized(ProxyError):
    """The shared-secret header was not supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    label = "Unauthorized"


class Forbidden(ProxyError):
    """The shared-secret header did not match."""

    status_code = status.HTTP_403_FORBIDDEN
    label = "Forbidden"


class UpstreamError(ProxyError):
    """
    Notion rejected the call, or it never completed (timeout, network).

    status_code mirrors Notion's response; 500 when there was no response.
    code is Notion's machine-readable error code (e.g. "object_not_found").
    """

    label = "Upstream API Error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        details = f"{message} (Upstream Code: {code})" if code else message
        super().__init__(details)
        self.message = message
        self.code = code
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
