"""Identity and locale predicates for route reconciliation.

The reconciliation engine asks these questions about routes it found for a
content item: does the route still point at this exact content object, is
it the variant for this locale, and which routes refer to the content at
all. The thin accessors (locales, translations, real class names) are here
because the engine asks the adapter, not the repository, for them.
"""

from __future__ import annotations

from typing import Any

from route_spine.core.models import TAG_NO_MULTILANG, AutoRoute, UriContext
from route_spine.core.protocols import DocumentRepository


class RouteComparator:
    """Stateless predicates over routes, content and locales."""

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    @staticmethod
    def generate_auto_route_tag(uri_context: UriContext) -> str:
        """Locale of *uri_context*, or ``TAG_NO_MULTILANG`` when unset or empty."""
        return uri_context.locale or TAG_NO_MULTILANG

    @staticmethod
    def compare_auto_route_content(route: AutoRoute, content: Any) -> bool:
        """True only if the route references this very content object."""
        return route.content is content

    @staticmethod
    def compare_auto_route_locale(route: AutoRoute, locale: str | None) -> bool:
        route_locale = route.locale or None
        if route_locale == TAG_NO_MULTILANG:
            route_locale = None
        return route_locale == locale

    def get_real_class_name(self, class_name: str | type) -> str:
        return self.repository.real_class_name(class_name)

    def get_locales(self, content: Any) -> list[str]:
        if self.repository.is_translatable(content):
            return list(self.repository.locales_for(content))
        return []

    def translate_object(self, content: Any, locale: str) -> Any:
        return self.repository.find_translation(
            self.repository.type_name(content),
            self.repository.content_identity(content),
            locale,
        )

    def get_referring_auto_routes(self, content: Any) -> list[AutoRoute]:
        """Every persisted route whose content reference is *content*."""
        return [
            route
            for route in self.repository.find_referrers(content, AutoRoute)
            if isinstance(route, AutoRoute)
        ]


__all__ = [
    "RouteComparator",
]
