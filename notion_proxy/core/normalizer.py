"""
Response normalizer: the terminal stage for every failure.

Each handler below maps one family of exceptions to the envelope

    {"error": <label>, "details": <message>, "status": <http status>}

Rules:
  • Every failure is logged before the response goes out.
  • Upstream errors mirror Notion's status; unknown errors are always 500.
  • No stack trace or raw upstream payload ever reaches the client.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notion_proxy.core.errors import ProxyError, UpstreamError

logger = logging.getLogger(__name__)

_INTERNAL_DETAILS = "An unexpected error occurred."


def error_envelope(
    label: str,
    details: str,
    status_code: int,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": label, "details": details, "status": status_code},
        headers=headers,
    )


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Malformed request."


# ── Handlers ────────────────────────────────────────────────
async def handle_upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(
        "Upstream error on %s %s: status=%d code=%s message=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.code,
        exc.message,
    )
    return error_envelope(exc.label, exc.details, exc.status_code)


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    logger.warning(
        "%s on %s %s: %s",
        exc.label,
        request.method,
        request.url.path,
        exc.details,
    )
    return error_envelope(exc.label, exc.details, exc.status_code)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = _describe_validation(exc)
    logger.warning("Bad request on %s %s: %s", request.method, request.url.path, details)
    return error_envelope("Bad Request", details, status.HTTP_400_BAD_REQUEST)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    logger.warning(
        "HTTP %d on %s %s: %s",
        exc.status_code,
        request.method,
        request.url.path,
        exc.detail,
    )
    return error_envelope(
        _reason_phrase(exc.status_code),
        str(exc.detail),
        exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_envelope(
        "Internal Server Error",
        _INTERNAL_DETAILS,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the normalizer on an app. Most specific handler wins."""
    app.add_exception_handler(UpstreamError, handle_upstream_error)  # type: ignore[arg-type]
    app.add_exception_handler(ProxyError, handle_proxy_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, handle_request_validation_error,  # type: ignore[arg-type]
    )
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
