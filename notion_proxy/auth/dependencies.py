"""
FastAPI dependency for shared-secret authentication.

Flow:
  1. No PROXY_API_KEY configured → allow (logged; local development only)
  2. Read the configured header (lookup is case-insensitive)
  3. Missing / empty  → 401 Unauthorized
  4. Mismatch         → 403 Forbidden
  5. Match            → allow

Security:
  • Constant-time comparison of the supplied key
  • The key itself is NEVER logged
"""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Request

from notion_proxy.core.config import Settings, get_settings
from notion_proxy.core.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


async def require_proxy_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """
    Router-level dependency guarding every proxied endpoint.

    Usage:
        APIRouter(dependencies=[Depends(require_proxy_key)])

    Raises Unauthorized (401) or Forbidden (403).
    """
    if not settings.auth_enabled:
        logger.warning("Skipping proxy authentication because PROXY_API_KEY is not set.")
        return

    header = settings.PROXY_API_KEY_HEADER
    provided = request.headers.get(header)

    if not provided:
        logger.info("Rejected %s %s: missing %s", request.method, request.url.path, header)
        raise Unauthorized(f"Missing {header} header.")

    expected = settings.PROXY_API_KEY or ""
    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.info("Rejected %s %s: invalid %s", request.method, request.url.path, header)
        raise Forbidden(f"Invalid {header}.")

    logger.debug("Authenticated %s %s", request.method, request.url.path)
