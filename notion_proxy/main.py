"""
FastAPI application factory.

Lifespan:
  • On startup: open the shared Notion HTTP client.
  • On shutdown: close it cleanly.

Routes:
  • /health: unauthenticated liveness probe
  • /blocks, /query-database, /insert-record: proxied to Notion (auth required)

Every failure is funnelled through the handlers registered by
register_error_handlers (see notion_proxy.core.normalizer).
"""

import datetime
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from notion_proxy.core.config import Settings
from notion_proxy.core.normalizer import register_error_handlers
from notion_proxy.routers.notion import router as notion_router
from notion_proxy.services.notion_client import NotionClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format=LOG_FORMAT,
    )


def _utc_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(settings: Settings) -> FastAPI:
    """Build the proxy app around an already-validated Settings object."""

    # ── Lifespan ────────────────────────────────────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.notion = NotionClient.from_settings(settings)
        logger.info("Notion client ready (API version %s)", settings.NOTION_API_VERSION)

        yield  # ← application runs here

        await app.state.notion.aclose()
        logger.info("Notion client closed")

    # ── App ─────────────────────────────────────────────────
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Authenticating relay in front of the Notion API.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)

    @app.middleware("http")
    async def log_requests(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    # ── Health check ────────────────────────────────────────
    @app.get(
        "/health",
        tags=["System"],
        summary="Liveness probe",
    )
    async def health_check() -> dict[str, str]:
        """Shallow health check, never requires the proxy key."""
        return {"status": "ok", "timestamp": _utc_timestamp()}

    # Mount routers
    app.include_router(notion_router)

    return app
