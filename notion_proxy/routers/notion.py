"""
Proxied Notion routes. Every endpoint here requires the proxy key.

GET  /blocks/{block_id}/children    → GET  /blocks/{block_id}/children
POST /query-database/{database_id}  → POST /databases/{database_id}/query
POST /insert-record/{database_id}   → POST /pages

Each route: validate → forward → relay. Successful Notion responses are
returned byte-for-byte with Notion's status code. Failures raise and are
turned into the error envelope by notion_proxy.core.normalizer.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response

from notion_proxy.auth.dependencies import require_proxy_key
from notion_proxy.core.config import Settings, get_settings
from notion_proxy.core.errors import BadRequest
from notion_proxy.schemas.records import SimplifiedRecord
from notion_proxy.services.notion_client import (
    NotionClient,
    UpstreamResponse,
    get_notion_client,
)
from notion_proxy.services.page_builder import build_page_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notion"], dependencies=[Depends(require_proxy_key)])

# Type aliases for cleaner signatures
Notion = Annotated[NotionClient, Depends(get_notion_client)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def _relay(upstream: UpstreamResponse) -> Response:
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.media_type,
    )


def _require_id(value: str, name: str) -> str:
    if not value.strip():
        raise BadRequest(f"Missing {name} parameter.")
    return value


async def _read_json(request: Request) -> Any:
    """
    Decode the request body. Called inside handlers so the proxy key is
    checked before an unauthenticated body is ever parsed.
    """
    if not await request.body():
        return None
    try:
        return await request.json()
    except ValueError as exc:
        raise BadRequest("Request body must be valid JSON.") from exc


@router.get(
    "/blocks/{block_id}/children",
    summary="List children of a Notion block",
)
async def fetch_block_children(block_id: str, notion: Notion) -> Response:
    _require_id(block_id, "block_id")

    logger.info("Fetching children for block: %s", block_id)
    upstream = await notion.list_block_children(block_id)
    logger.info("Successfully fetched children for block: %s", block_id)

    return _relay(upstream)


@router.post(
    "/query-database/{database_id}",
    summary="Query a Notion database",
    description="The request body is forwarded to Notion unchanged.",
)
async def query_database(
    database_id: str,
    request: Request,
    notion: Notion,
) -> Response:
    _require_id(database_id, "database_id")
    query = await _read_json(request)
    if not isinstance(query, dict) or not query:
        raise BadRequest("Missing request body for database query.")

    logger.info("Querying database: %s", database_id)
    upstream = await notion.query_database(database_id, query)
    logger.info("Successfully queried database: %s", database_id)

    return _relay(upstream)


@router.post(
    "/insert-record/{database_id}",
    summary="Insert a simplified record as a Notion page",
    description=(
        "Accepts {Term, Definition, Category, Synonyms?} and maps each field "
        "onto the database properties configured in NOTION_PROPERTY_MAP."
    ),
)
async def insert_record(
    database_id: str,
    notion: Notion,
    request: Request,
    settings: AppSettings,
) -> Response:
    """
    No idempotency key: repeating the call creates a second page.
    """
    _require_id(database_id, "database_id")
    record = SimplifiedRecord.from_payload(await _read_json(request))

    page = build_page_payload(database_id, record, settings.NOTION_PROPERTY_MAP)

    logger.info("Inserting record into database: %s", database_id)
    upstream = await notion.create_page(page)
    logger.info("Successfully inserted record into database: %s", database_id)

    return _relay(upstream)
