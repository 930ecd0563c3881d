"""
Centralized settings for route-spine.

Manifesto:
    One validated, cached settings object. Everything the adapter layer
    reads at startup (base path, route shape, adapter choice, persistence
    backend) lives here and is handed to constructors explicitly; nothing
    reads settings at request time.

All fields can be set via ``ROUTING_AUTO_*`` environment variables (e.g.
``ROUTING_AUTO_ROUTE_BASEPATH=/site/routes``) or a ``.env`` file.

Tags:
    route-spine, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from route_spine.core.paths import join_path


class PersistenceBackend(str, Enum):
    """Where the route tree is stored."""

    MEMORY = "memory"
    SQLALCHEMY = "sqlalchemy"


class MappingResource(BaseModel):
    """A mapping file the routing engine loads (``type`` None = by extension)."""

    path: str
    type: str | None = None


class RoutingAutoSettings(BaseSettings):
    """Route-spine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTING_AUTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # ── Route tree ───────────────────────────────────────────────
    route_basepath: str = Field(default="/cms/routes", description="Route path for all routes")
    route_shape: str = Field(default="auto_route", description="Shape id of the route class to use")

    # ── Adapter selection ────────────────────────────────────────
    adapter: str | None = Field(
        default=None, description="Use a specific adapter, overrides any implicit selection"
    )

    # ── Persistence ──────────────────────────────────────────────
    persistence_backend: PersistenceBackend = Field(default=PersistenceBackend.MEMORY)
    database_url: str = Field(default="sqlite:///data/routes.db")
    database_echo: bool = Field(default=False)

    # ── Mapping ──────────────────────────────────────────────────
    auto_mapping: bool = Field(default=True)
    mapping_resources: list[MappingResource] = Field(default_factory=list)

    # ── Back-references ──────────────────────────────────────────
    prune_referrers_on_remove: bool = Field(default=False)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")

    @field_validator("route_basepath")
    @classmethod
    def _absolute_basepath(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("route_basepath cannot be empty")
        if not value.startswith("/"):
            raise ValueError(f"route_basepath must be absolute, got {value!r}")
        return join_path(value)

    @field_validator("mapping_resources", mode="before")
    @classmethod
    def _normalize_resources(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            value = [value]
        return [{"path": item} if isinstance(item, str) else item for item in value]

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got {value!r}")
        return value

    # ── Derived properties ───────────────────────────────────────

    @property
    def adapter_name(self) -> str:
        """Explicit adapter, else the implicit ``document`` adapter."""
        return self.adapter or "document"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, RoutingAutoSettings] = {}


def get_settings(*, _force_reload: bool = False, **overrides: Any) -> RoutingAutoSettings:
    """Load, validate, and cache a :class:`RoutingAutoSettings` instance.

    Keyword *overrides* take precedence over the environment and are part
    of the cache key.
    """
    cache_key = repr(sorted(overrides.items()))
    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    settings = RoutingAutoSettings(**overrides)
    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
