"""
Abstract adapter contract consumed by the reconciliation engine.

Manifesto:
    The engine decides which URIs should exist for a content item; it never
    touches storage itself. Everything it needs from persistence goes
    through these twelve operations, so swapping the storage backend means
    writing one adapter.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                    AutoRouteAdapter (ABC)                     │
        ├──────────────────────────────────────────────────────────────┤
        │  Tree                        │  Predicates / lookups          │
        │  ────                        │  ────────────────────          │
        │  create_auto_route           │  generate_auto_route_tag       │
        │  create_redirect_route       │  compare_auto_route_content    │
        │  migrate_auto_route_children │  compare_auto_route_locale     │
        │  remove_auto_route           │  get_locales                   │
        │  find_route_for_uri          │  translate_object              │
        │                              │  get_real_class_name           │
        │                              │  get_referring_auto_routes     │
        └──────────────────────────────────────────────────────────────┘

Tags:
    adapter, contract, abc, route-spine
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from route_spine.core.models import AutoRoute, UriContext


class AutoRouteAdapter(ABC):
    """Operations the reconciliation engine performs through an adapter."""

    @abstractmethod
    def get_locales(self, content: Any) -> list[str]:
        """Locales *content* is available in; empty if not translatable."""

    @abstractmethod
    def translate_object(self, content: Any, locale: str) -> Any:
        """*content* translated into *locale*."""

    @abstractmethod
    def generate_auto_route_tag(self, uri_context: UriContext) -> str:
        """Tag disambiguating route variants at the same URI."""

    @abstractmethod
    def migrate_auto_route_children(self, source_route: AutoRoute, dest_route: AutoRoute) -> None:
        """Move children of *source_route* under *dest_route*."""

    @abstractmethod
    def remove_auto_route(self, route: AutoRoute) -> None:
        """Remove *route* and its subtree."""

    @abstractmethod
    def create_auto_route(self, uri_context: UriContext, locale: str | None) -> AutoRoute:
        """Materialize the URI of *uri_context* and return its route."""

    @abstractmethod
    def create_redirect_route(self, referring_route: AutoRoute, new_route: AutoRoute) -> None:
        """Turn *referring_route* into a redirect to *new_route*."""

    @abstractmethod
    def get_real_class_name(self, class_name: str | type) -> str:
        """Real class name behind a possibly proxied class."""

    @abstractmethod
    def compare_auto_route_content(self, route: AutoRoute, content: Any) -> bool:
        """True if *route* references exactly *content*."""

    @abstractmethod
    def compare_auto_route_locale(self, route: AutoRoute, locale: str | None) -> bool:
        """True if *route* is the variant for *locale*."""

    @abstractmethod
    def get_referring_auto_routes(self, content: Any) -> list[AutoRoute]:
        """Routes whose content reference is *content*."""

    @abstractmethod
    def find_route_for_uri(self, uri: str, uri_context: UriContext | None = None) -> AutoRoute | None:
        """Route at *uri* below the base path, if any."""


__all__ = [
    "AutoRouteAdapter",
]
