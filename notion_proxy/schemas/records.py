"""
Simplified record accepted by POST /insert-record/{database_id}.

    {"Term": str, "Definition": str, "Category": str, "Synonyms": [str, ...]}

Validation is done by hand rather than via FastAPI's body parsing so
that failures produce the proxy's 400 envelope with readable details
instead of a 422 list.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notion_proxy.core.errors import BadRequest

_REQUIRED = ("Term", "Definition", "Category")


class SimplifiedRecord(BaseModel):
    """A validated record, keyed by logical field name."""

    model_config = ConfigDict(frozen=True)

    term: str
    definition: str
    category: str
    synonyms: list[str] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> SimplifiedRecord:
        """
        Validate a raw JSON body.

        Raises BadRequest when a required field is missing or blank,
        or when Synonyms is present but not an array of strings.
        """
        if not isinstance(payload, dict):
            raise BadRequest("Request body must be a JSON object.")

        missing = [
            key for key in _REQUIRED
            if not isinstance(payload.get(key), str) or not payload[key].strip()
        ]
        if missing:
            raise BadRequest(
                f"Missing required fields in request body ({', '.join(missing)}).",
            )

        synonyms = payload.get("Synonyms")
        if synonyms is None:
            synonyms = []
        elif not isinstance(synonyms, list) or not all(isinstance(s, str) for s in synonyms):
            raise BadRequest("Synonyms field must be an array of strings.")

        return cls(
            term=payload["Term"],
            definition=payload["Definition"],
            category=payload["Category"],
            synonyms=synonyms,
        )

    def value_of(self, field: str) -> str | list[str]:
        return getattr(self, field)
