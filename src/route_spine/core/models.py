"""Route tree models.

Manifesto:
    The materializer works with typed node objects, never raw records.
    A node's concrete class *is* its shape: a ``PlaceholderNode`` fills an
    intermediate path segment, an ``AutoRoute`` carries routing semantics,
    anything else below the base path is a foreign document.

Nodes compare by identity (``eq=False``) so that two loads of the same
record through one repository session are the same object, and so that
content references are checked with ``is``.

Tags:
    route-spine, models, dataclasses, route-tree

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from route_spine.core.paths import ROOT_PATH, join_path

# Locale tag stored on routes created without a locale
TAG_NO_MULTILANG = "no-multilang"


class RouteType(str, Enum):
    """How a route resolves: directly to content, or via another route."""

    PRIMARY = "primary"
    REDIRECT = "redirect"


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class TreeNode:
    """A persisted node at a path in the document repository."""

    shape: ClassVar[str] = "node"

    name: str = ""
    parent_path: str | None = None
    id: str | None = None

    @property
    def path(self) -> str:
        if self.parent_path is None:
            return ROOT_PATH
        return join_path(self.parent_path, self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, id={self.id!r})"


@dataclass(eq=False)
class PlaceholderNode(TreeNode):
    """Structural node without routing semantics (intermediate segments)."""

    shape: ClassVar[str] = "generic"


@dataclass(eq=False)
class Document(TreeNode):
    """Generic typed document; never expected inside the route tree."""

    shape: ClassVar[str] = "document"


@dataclass(eq=False)
class AutoRoute(TreeNode):
    """Route node managed by the automatic routing engine.

    ``content`` is None only while a freshly converted placeholder awaits
    binding. A REDIRECT route points at ``redirect_target`` instead of
    resolving to its own content.
    """

    shape: ClassVar[str] = "auto_route"

    content: Any = None
    locale: str | None = None
    route_type: RouteType = RouteType.PRIMARY
    redirect_target: AutoRoute | None = None
    defaults: dict[str, Any] = field(default_factory=dict)

    def set_default(self, key: str, value: Any) -> None:
        self.defaults[key] = value

    def get_default(self, key: str, default: Any = None) -> Any:
        return self.defaults.get(key, default)

    @property
    def is_redirect(self) -> bool:
        return self.route_type == RouteType.REDIRECT

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self.path!r}, locale={self.locale!r}, "
            f"route_type={self.route_type.value})"
        )


# ---------------------------------------------------------------------------
# Request value objects
# ---------------------------------------------------------------------------


@dataclass
class UriContext:
    """One routing request from the reconciliation engine.

    Lives for a single call into the adapter; never persisted.
    """

    subject: Any
    uri: str
    locale: str | None = None
    defaults: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Content back-references
# ---------------------------------------------------------------------------


class RouteReferrerMixin:
    """List-backed implementation of the ``RouteReferrer`` capability.

    Mix into a content class to have the adapter track the routes that
    point at it.
    """

    def _route_list(self) -> list[AutoRoute]:
        routes = self.__dict__.get("_routes")
        if routes is None:
            routes = []
            self.__dict__["_routes"] = routes
        return routes

    def add_route(self, route: AutoRoute) -> None:
        self._route_list().append(route)

    def remove_route(self, route: AutoRoute) -> None:
        routes = self._route_list()
        self.__dict__["_routes"] = [r for r in routes if r is not route]

    def get_routes(self) -> list[AutoRoute]:
        return list(self._route_list())


__all__ = [
    "TAG_NO_MULTILANG",
    "RouteType",
    "TreeNode",
    "PlaceholderNode",
    "Document",
    "AutoRoute",
    "UriContext",
    "RouteReferrerMixin",
]
