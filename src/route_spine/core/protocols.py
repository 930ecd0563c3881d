"""
Canonical protocol definitions for route-spine.

Manifesto:
    The materializer depends on shape, not implementation. Any repository
    that can find, create, move and remove nodes by path, rewrite a node's
    shape and answer content questions can back the route tree.

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── DocumentRepository  — path-addressed node storage + session
        ├── ContentStore        — content identity, translations, type names
        └── RouteReferrer       — content that tracks its referring routes

    Implementations:
        repositories/memory.py      InMemoryDocumentRepository
        repositories/sql.py         SQLAlchemyDocumentRepository
        content.py                  InMemoryContentStore, ReferenceContentStore

Guardrails:
    ❌ DON'T: Type-check against concrete repositories in the materializer
    ✅ DO: Depend on DocumentRepository

    ❌ DON'T: Require content classes to inherit from anything
    ✅ DO: Check RouteReferrer structurally at the boundary

Tags:
    protocol, repository, content, route-referrer, route-spine
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from route_spine.core.models import AutoRoute, TreeNode


class DocumentRepository(Protocol):
    """
    Path-addressed node storage with unit-of-work session semantics.

    Creates, moves and removals are visible to later calls in the same
    session immediately and become durable on :meth:`commit`. Field changes
    on loaded nodes are flushed on commit.

    Architecture:
        ::

            ┌────────────────────────────────────────────────────────────┐
            │ find_by_path(path, shape)     → node | None                │
            │ find_by_identity(id)          → node | None                │
            │ create_child(parent, name, s) → node (pending)             │
            │ children(node)                → list[node]                 │
            │ move(src, dest)               → None (pending)             │
            │ remove_subtree(path)          → None (pending)             │
            │ rewrite_shape(node, shape)    → None (needs commit+reload) │
            │ reload(node)                  → node                       │
            │ commit() / rollback()                                      │
            │ find_referrers(content, s)    → list[node]                 │
            │ content passthroughs (translations, identity, type names)  │
            └────────────────────────────────────────────────────────────┘
    """

    def find_by_path(
        self, path: str, shape: type[TreeNode] | None = None
    ) -> TreeNode | None:
        """Node at *path*, or None. With *shape*, None unless it is an instance."""
        ...

    def find_by_identity(self, node_id: str) -> TreeNode | None:
        ...

    def create_child(
        self, parent: TreeNode, name: str, shape: type[TreeNode] | str
    ) -> TreeNode:
        """Create and register a new node named *name* under *parent*."""
        ...

    def children(self, node: TreeNode) -> list[TreeNode]:
        ...

    def move(self, source_path: str, dest_path: str) -> None:
        ...

    def remove_subtree(self, path: str) -> None:
        ...

    def rewrite_shape(self, node: TreeNode, shape: type[TreeNode] | str) -> None:
        """Change the persisted shape of *node*; commit and reload before use."""
        ...

    def reload(self, node: TreeNode) -> TreeNode | None:
        """Detach *node* and load it again from the repository."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def is_translatable(self, content: Any) -> bool:
        ...

    def locales_for(self, content: Any) -> list[str]:
        ...

    def find_translation(self, type_name: str, content_id: str, locale: str) -> Any:
        ...

    def content_identity(self, content: Any) -> str:
        ...

    def type_name(self, content: Any) -> str:
        ...

    def real_class_name(self, class_name: str | type) -> str:
        ...

    def find_referrers(
        self, content: Any, shape: type[TreeNode] = AutoRoute
    ) -> Sequence[TreeNode]:
        ...


class ContentStore(Protocol):
    """
    Content identity and translation lookups.

    The repository stores only a content identifier on route records; the
    content store turns content objects into identifiers and back, and
    answers translation questions on behalf of the CMS.
    """

    def identify(self, content: Any) -> str:
        ...

    def resolve(self, content_id: str) -> Any:
        ...

    def is_translatable(self, content: Any) -> bool:
        ...

    def locales_for(self, content: Any) -> list[str]:
        ...

    def find_translation(self, type_name: str, content_id: str, locale: str) -> Any:
        ...

    def type_name(self, content: Any) -> str:
        ...

    def real_class_name(self, class_name: str | type) -> str:
        ...


@runtime_checkable
class RouteReferrer(Protocol):
    """Content that keeps a list of the routes pointing at it."""

    def add_route(self, route: AutoRoute) -> None:
        ...

    def remove_route(self, route: AutoRoute) -> None:
        ...

    def get_routes(self) -> list[AutoRoute]:
        ...


__all__ = [
    "DocumentRepository",
    "ContentStore",
    "RouteReferrer",
]
