"""
Application settings loaded from environment variables.

Uses pydantic-settings so that every config value is validated at startup.
The settings object is built once at process entry and injected into the
app factory; handlers never read the environment themselves.

Secrets:
  • NOTION_API_KEY: required; the process refuses to start without it.
  • PROXY_API_KEY: optional; when unset the proxy accepts every caller.
"""

from __future__ import annotations

from typing import Literal

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PropertyType = Literal["title", "rich_text", "select", "multi_select"]

# Logical record fields accepted by POST /insert-record
RECORD_FIELDS = ("term", "definition", "category", "synonyms")
_LIST_FIELDS = frozenset({"synonyms"})


class PropertySpec(BaseModel):
    """Target Notion property for one logical record field."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    type: PropertyType


# Placeholder schema. Override NOTION_PROPERTY_MAP to match the target database.
DEFAULT_PROPERTY_MAP: dict[str, PropertySpec] = {
    "term": PropertySpec(name="Name", type="title"),
    "definition": PropertySpec(name="Definition", type="rich_text"),
    "category": PropertySpec(name="Category", type="select"),
    "synonyms": PropertySpec(name="Synonyms", type="multi_select"),
}


class Settings(BaseSettings):
    """
    Central configuration.

    NOTION_PROPERTY_MAP is JSON in the environment, e.g.:
        {"term": {"name": "Word", "type": "title"}, ...}
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # ── Required ────────────────────────────────────────────
    NOTION_API_KEY: str = Field(..., min_length=1)

    # ── Proxy authentication ────────────────────────────────
    PROXY_API_KEY: str | None = None
    PROXY_API_KEY_HEADER: str = "X-Proxy-API-Key"

    # ── Server ──────────────────────────────────────────────
    APP_NAME: str = "Notion Proxy"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)

    # ── Upstream (Notion) ───────────────────────────────────
    NOTION_BASE_URL: str = "https://api.notion.com/v1"
    NOTION_API_VERSION: str = "2022-06-28"
    NOTION_PROPERTY_MAP: dict[str, PropertySpec] = Field(
        default_factory=lambda: dict(DEFAULT_PROPERTY_MAP),
    )

    @field_validator("PROXY_API_KEY")
    @classmethod
    def blank_means_unset(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("NOTION_PROPERTY_MAP")
    @classmethod
    def validate_property_map(
        cls, value: dict[str, PropertySpec],
    ) -> dict[str, PropertySpec]:
        missing = [field for field in RECORD_FIELDS if field not in value]
        if missing:
            raise ValueError(f"property map is missing fields: {', '.join(missing)}")

        unknown = sorted(set(value) - set(RECORD_FIELDS))
        if unknown:
            raise ValueError(f"property map has unknown fields: {', '.join(unknown)}")

        for field, spec in value.items():
            if field in _LIST_FIELDS and spec.type != "multi_select":
                raise ValueError(f"'{field}' must map to a multi_select property")
            if field not in _LIST_FIELDS and spec.type == "multi_select":
                raise ValueError(f"'{field}' cannot map to a multi_select property")

        titles = [field for field, spec in value.items() if spec.type == "title"]
        if len(titles) != 1:
            raise ValueError("property map needs exactly one title property")

        names = [spec.name for spec in value.values()]
        if len(set(names)) != len(names):
            raise ValueError("property names in the map must be unique")

        return value

    @property
    def auth_enabled(self) -> bool:
        return self.PROXY_API_KEY is not None


def load_settings() -> Settings:
    """Build settings from the environment (and .env, if present)."""
    return Settings()  # type: ignore[call-arg]


# ── Dependency ──────────────────────────────────────────────
def get_settings(request: Request) -> Settings:
    """The settings the running app was built with."""
    return request.app.state.settings
