"""
Path materialization for automatic routes.

Turns a candidate URI into a chain of persisted tree nodes below the
configured base path, and reshapes that tree when a content item's URI
changes.

Manifesto:
    A URI like ``/blog/2024/hello`` becomes placeholders at ``blog`` and
    ``2024`` and a route at ``hello``. A node that already exists at a
    route path is never deleted and recreated: a placeholder is converted
    in place (so references to it and its children survive), and anything
    else is a conflict the caller has to resolve.

Architecture:
    ::

        create_auto_route(ctx, locale)
          │
          ├─ base path exists?            no  → ConfigurationError
          ├─ for each intermediate segment
          │     exists?  yes → descend (any shape)
          │              no  → create PlaceholderNode
          └─ head path
                absent       → new route (PRIMARY) + defaults + back-ref
                placeholder  → convert_shape → bind (PRIMARY) + back-ref
                same route   → returned as is (same content and locale)
                other        → ConflictError

        convert_shape(node, cls):  rewrite_shape → commit → reload → verify

Examples:
    >>> materializer = PathMaterializer(repo, MaterializerConfig(base_path="/routes"))
    >>> route = materializer.create_auto_route(UriContext(article, "/a/b/c"), "en")
    >>> route.path
    '/routes/a/b/c'

Guardrails:
    ❌ DON'T: Set route fields on a node before its shape change is reloaded
    ✅ DO: Use convert_shape(), which only returns the reloaded node

    ❌ DON'T: Remove a route whose children should survive
    ✅ DO: migrate_auto_route_children() first, then remove_auto_route()

Tags:
    route-tree, materialization, migration, route-spine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from route_spine.core.errors import (
    ConfigurationError,
    ConflictError,
    InvalidUriError,
    MigrationError,
)
from route_spine.core.logging import get_logger
from route_spine.core.models import AutoRoute, PlaceholderNode, RouteType, TreeNode, UriContext
from route_spine.core.paths import join_path, split_segments
from route_spine.core.protocols import DocumentRepository, RouteReferrer
from route_spine.core.shapes import resolve_route_class

logger = get_logger(__name__)

DEFAULT_BASE_PATH = "/cms/routes"


@dataclass(frozen=True)
class MaterializerConfig:
    """Explicit configuration handed to :class:`PathMaterializer`.

    Attributes:
        base_path: Root of the route tree; must already exist in the repository
        route_class: Class new and converted routes are materialized as
        prune_referrers_on_remove: Drop a removed route from its content's
            back-references (off by default)
    """

    base_path: str = DEFAULT_BASE_PATH
    route_class: type[AutoRoute] = AutoRoute
    prune_referrers_on_remove: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_path", join_path(self.base_path))
        resolve_route_class(self.route_class)

    @classmethod
    def from_settings(cls, settings: Any) -> MaterializerConfig:
        return cls(
            base_path=settings.route_basepath,
            route_class=resolve_route_class(settings.route_shape),
            prune_referrers_on_remove=settings.prune_referrers_on_remove,
        )


class PathMaterializer:
    """Creates, converts, relocates and removes route nodes in the tree."""

    def __init__(self, repository: DocumentRepository, config: MaterializerConfig | None = None) -> None:
        self.repository = repository
        self.config = config or MaterializerConfig()

    @property
    def base_path(self) -> str:
        return self.config.base_path

    # -- Materialization ---------------------------------------------------

    def create_auto_route(self, uri_context: UriContext, locale: str | None) -> AutoRoute:
        """Materialize *uri_context*'s URI and return the route at its head.

        An occupied head path is only reused when it is a placeholder or a
        route already bound to the same content and locale, so repeating a
        call is idempotent; any other occupant is a conflict.

        Raises:
            ConfigurationError: the base path does not exist.
            InvalidUriError: the URI has no segments.
            ConflictError: the head path holds anything but a placeholder or a
                route already bound to the same content and locale.
            StorageError: the content's id belongs to another content object.
        """
        parent = self.repository.find_by_path(self.base_path)
        if parent is None:
            raise ConfigurationError(
                f'The "route_basepath" configuration points to a non-existent path "{self.base_path}".'
            ).with_context(path=self.base_path)

        segments = split_segments(uri_context.uri)
        if not segments:
            raise InvalidUriError(uri_context.uri)
        head_name = segments.pop()
        content = uri_context.subject

        # An id clash surfaces here, before any node is created or converted
        self.repository.content_identity(content)

        path = self.base_path
        for segment in segments:
            path = join_path(path, segment)
            node = self.repository.find_by_path(path)
            if node is None:
                node = self.repository.create_child(parent, segment, PlaceholderNode)
                logger.debug("placeholder_created", path=path)
            parent = node

        path = join_path(path, head_name)
        existing = self.repository.find_by_path(path)

        if existing is not None:
            if isinstance(existing, PlaceholderNode):
                return self._migrate_generic_to_route(existing, content, locale, RouteType.PRIMARY)

            if (
                isinstance(existing, self.config.route_class)
                and existing.content is content
                and (existing.locale or None) == (locale or None)
            ):
                logger.debug("auto_route_reused", path=path, locale=locale)
                return existing

            logger.warning("route_conflict", path=path, existing_type=type(existing).__name__)
            raise ConflictError(
                f'Encountered existing document at path "{path}" of type '
                f'"{type(existing).__name__}", the route tree should contain only '
                "placeholders and auto routes.",
                path=path,
                existing_type=type(existing).__name__,
            ).with_context(uri=uri_context.uri, locale=locale)

        route = self.repository.create_child(parent, head_name, self.config.route_class)
        route.content = content
        route.locale = locale
        route.route_type = RouteType.PRIMARY
        for key, value in uri_context.defaults.items():
            route.set_default(key, value)
        self._add_back_reference(content, route)

        logger.info("auto_route_created", path=route.path, locale=locale)
        return route

    def convert_shape(self, node: TreeNode, target_class: type[AutoRoute]) -> AutoRoute:
        """Convert *node* in place to *target_class* and return the reloaded node.

        The stored shape is rewritten and committed, the stale object is
        detached and the node is loaded again. Only the reloaded,
        correctly-typed node is ever returned.

        Raises:
            MigrationError: the reloaded node is not a *target_class*.
        """
        self.repository.rewrite_shape(node, target_class)
        self.repository.commit()
        reloaded = self.repository.reload(node)

        if not isinstance(reloaded, target_class):
            actual = type(reloaded).__name__ if reloaded is not None else "None"
            raise MigrationError(
                f'Failed to migrate existing node at "{node.path}" to a route implementing '
                f'{target_class.__name__}. It is an instance of "{actual}".',
                path=node.path,
                actual_type=actual,
            )
        return reloaded

    def _migrate_generic_to_route(
        self,
        node: PlaceholderNode,
        content: Any,
        locale: str | None,
        route_type: RouteType,
    ) -> AutoRoute:
        route = self.convert_shape(node, self.config.route_class)
        route.content = content
        route.locale = locale
        route.route_type = route_type
        self._add_back_reference(content, route)

        logger.info("placeholder_migrated", path=route.path, locale=locale)
        return route

    @staticmethod
    def _add_back_reference(content: Any, route: AutoRoute) -> None:
        if isinstance(content, RouteReferrer):
            content.add_route(route)

    # -- Tree reshaping ----------------------------------------------------

    def migrate_auto_route_children(self, source_route: AutoRoute, dest_route: AutoRoute) -> None:
        """Move every direct child of *source_route* under *dest_route*.

        Raises:
            ConflictError: a child name already exists under *dest_route*;
                nothing is moved.
        """
        children = self.repository.children(source_route)
        collisions = [
            child.name
            for child in children
            if self.repository.find_by_path(join_path(dest_route.path, child.name)) is not None
        ]
        if collisions:
            raise ConflictError(
                f'Cannot migrate children of "{source_route.path}" to "{dest_route.path}": '
                f"names already taken: {', '.join(collisions)}",
                path=dest_route.path,
                names=collisions,
            )

        for child in children:
            self.repository.move(child.path, join_path(dest_route.path, child.name))
        logger.info(
            "children_migrated",
            source=source_route.path,
            dest=dest_route.path,
            count=len(children),
        )

    def remove_auto_route(self, route: AutoRoute) -> None:
        """Delete *route* and its whole subtree, committing immediately."""
        if self.config.prune_referrers_on_remove and isinstance(route.content, RouteReferrer):
            route.content.remove_route(route)
        path = route.path
        self.repository.remove_subtree(path)
        self.repository.commit()
        logger.info("auto_route_removed", path=path)

    def create_redirect_route(self, referring_route: AutoRoute, new_route: AutoRoute) -> None:
        """Point *referring_route* at *new_route*; the caller commits."""
        referring_route.redirect_target = new_route
        referring_route.route_type = RouteType.REDIRECT
        logger.debug("redirect_created", source=referring_route.path, target=new_route.path)

    def find_route_for_uri(self, uri: str, uri_context: UriContext | None = None) -> AutoRoute | None:
        node = self.repository.find_by_path(join_path(self.base_path, uri), AutoRoute)
        return node if isinstance(node, AutoRoute) else None


__all__ = [
    "DEFAULT_BASE_PATH",
    "MaterializerConfig",
    "PathMaterializer",
]
