"""Adapter over a path-addressed document repository.

``DocumentAdapter`` is the engine-facing implementation of
:class:`~route_spine.core.adapters.base.AutoRouteAdapter`: tree operations go
to a :class:`~route_spine.core.materializer.PathMaterializer`, predicates and
lookups to a :class:`~route_spine.core.comparator.RouteComparator`, both over
the same repository session.

Usage::

    repo = InMemoryDocumentRepository(InMemoryContentStore())
    repo.ensure_path("/cms/routes")
    adapter = DocumentAdapter(repo, MaterializerConfig(base_path="/cms/routes"))

    route = adapter.create_auto_route(UriContext(article, "/news/hello", "en"), "en")
    repo.commit()
"""

from __future__ import annotations

from typing import Any

from route_spine.core.adapters.base import AutoRouteAdapter
from route_spine.core.comparator import RouteComparator
from route_spine.core.materializer import MaterializerConfig, PathMaterializer
from route_spine.core.models import TAG_NO_MULTILANG, AutoRoute, UriContext
from route_spine.core.protocols import DocumentRepository


class DocumentAdapter(AutoRouteAdapter):
    """Automatic routing adapter for document repositories.

    Parameters:
        repository: Node storage (in-memory or SQLAlchemy).
        config: Base path and route class. The route class is validated on
            construction and must extend ``AutoRoute``.
    """

    TAG_NO_MULTILANG = TAG_NO_MULTILANG

    def __init__(self, repository: DocumentRepository, config: MaterializerConfig | None = None) -> None:
        self.repository = repository
        self.materializer = PathMaterializer(repository, config)
        self.comparator = RouteComparator(repository)

    @property
    def config(self) -> MaterializerConfig:
        return self.materializer.config

    def get_locales(self, content: Any) -> list[str]:
        return self.comparator.get_locales(content)

    def translate_object(self, content: Any, locale: str) -> Any:
        return self.comparator.translate_object(content, locale)

    def generate_auto_route_tag(self, uri_context: UriContext) -> str:
        return self.comparator.generate_auto_route_tag(uri_context)

    def migrate_auto_route_children(self, source_route: AutoRoute, dest_route: AutoRoute) -> None:
        self.materializer.migrate_auto_route_children(source_route, dest_route)

    def remove_auto_route(self, route: AutoRoute) -> None:
        self.materializer.remove_auto_route(route)

    def create_auto_route(self, uri_context: UriContext, locale: str | None) -> AutoRoute:
        return self.materializer.create_auto_route(uri_context, locale)

    def create_redirect_route(self, referring_route: AutoRoute, new_route: AutoRoute) -> None:
        self.materializer.create_redirect_route(referring_route, new_route)

    def get_real_class_name(self, class_name: str | type) -> str:
        return self.comparator.get_real_class_name(class_name)

    def compare_auto_route_content(self, route: AutoRoute, content: Any) -> bool:
        return self.comparator.compare_auto_route_content(route, content)

    def compare_auto_route_locale(self, route: AutoRoute, locale: str | None) -> bool:
        return self.comparator.compare_auto_route_locale(route, locale)

    def get_referring_auto_routes(self, content: Any) -> list[AutoRoute]:
        return self.comparator.get_referring_auto_routes(content)

    def find_route_for_uri(self, uri: str, uri_context: UriContext | None = None) -> AutoRoute | None:
        return self.materializer.find_route_for_uri(uri, uri_context)


__all__ = [
    "DocumentAdapter",
]
