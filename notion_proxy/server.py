"""
Process entrypoint.

Usage:
    python -m notion_proxy.server
    notion-proxy

Loads settings once, refuses to start without NOTION_API_KEY (or with an
invalid NOTION_PROPERTY_MAP), then serves the app with uvicorn.
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from notion_proxy.core.config import Settings, load_settings
from notion_proxy.main import LOG_FORMAT, configure_logging, create_app

logger = logging.getLogger("notion_proxy")


def _log_startup(settings: Settings) -> None:
    logger.info("Notion Proxy Server starting on %s:%d", settings.HOST, settings.PORT)
    logger.info("Notion API Version: %s", settings.NOTION_API_VERSION)
    if settings.auth_enabled:
        logger.info("Proxy authentication enabled (header %s).", settings.PROXY_API_KEY_HEADER)
    else:
        logger.warning("Proxy authentication disabled (PROXY_API_KEY not set).")


def main() -> None:
    try:
        settings = load_settings()
    except ValidationError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        for error in exc.errors():
            field = ".".join(str(p) for p in error["loc"]) or "settings"
            logger.critical("FATAL ERROR: %s: %s", field, error["msg"])
        sys.exit(1)

    configure_logging(settings)
    _log_startup(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
