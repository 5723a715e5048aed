"""
Translate a SimplifiedRecord into a Notion page-creation payload.

Property names and types come from the configured property map
(NOTION_PROPERTY_MAP), never from code. They depend on the target
database's schema.
"""

from __future__ import annotations

from typing import Any

from notion_proxy.core.config import PropertySpec
from notion_proxy.schemas.records import SimplifiedRecord


def _text(content: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


def render_property(spec: PropertySpec, value: str | list[str]) -> dict[str, Any]:
    """Render one value in the shape Notion expects for spec.type."""
    if spec.type == "multi_select":
        names = value if isinstance(value, list) else [value]
        return {"type": "multi_select", "multi_select": [{"name": n} for n in names]}

    text = ", ".join(value) if isinstance(value, list) else value
    if spec.type == "select":
        return {"type": "select", "select": {"name": text}}
    # title and rich_text share the same rich-text array shape
    return {"type": spec.type, spec.type: _text(text)}


def build_page_payload(
    database_id: str,
    record: SimplifiedRecord,
    property_map: dict[str, PropertySpec],
) -> dict[str, Any]:
    """Body for POST /pages creating `record` inside `database_id`."""
    properties = {
        spec.name: render_property(spec, record.value_of(field))
        for field, spec in property_map.items()
    }
    return {
        "parent": {"database_id": database_id},
        "properties": properties,
    }
