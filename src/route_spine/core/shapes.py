"""Shape registry: maps persisted shape identifiers to node classes.

Manifesto:
    A record in the repository stores only a shape identifier; the class
    a node is materialized as is decided here at load time. Rewriting a
    record's shape and reloading it is how a placeholder becomes a route.

Features:
    - ``ShapeRegistry`` with the built-in shapes pre-registered
    - ``register()`` for custom route classes (e.g. an ``AutoRoute`` subclass
      with extra fields)
    - ``resolve_route_class()`` validates a configured route shape

Tags:
    route-spine, shapes, registry, singleton
"""

from __future__ import annotations

from route_spine.core.errors import InvalidConfigError, StorageError
from route_spine.core.models import AutoRoute, Document, PlaceholderNode, TreeNode


class ShapeRegistry:
    """
    Registry of node classes by shape identifier.

    Pre-registered shapes:
    - ``generic`` — :class:`PlaceholderNode`
    - ``auto_route`` — :class:`AutoRoute`
    - ``document`` — :class:`Document`
    """

    def __init__(self):
        self._classes: dict[str, type[TreeNode]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self.register(PlaceholderNode)
        self.register(AutoRoute)
        self.register(Document)

    def register(self, node_class: type[TreeNode], shape: str | None = None) -> None:
        """Register *node_class* under *shape* (defaults to its ``shape`` attribute)."""
        self._classes[(shape or node_class.shape).lower()] = node_class

    def find(self, shape: str) -> type[TreeNode] | None:
        return self._classes.get(shape.lower())

    def get(self, shape: str) -> type[TreeNode]:
        """Look up a class for a persisted shape; unknown shapes are a storage fault."""
        node_class = self.find(shape)
        if node_class is None:
            raise StorageError(f"Unknown node shape: {shape}")
        return node_class

    def shape_of(self, node_class: type[TreeNode]) -> str:
        for shape, registered in self._classes.items():
            if registered is node_class:
                return shape
        raise StorageError(f"Node class {node_class.__qualname__} is not a registered shape")

    def list_shapes(self) -> list[str]:
        return sorted(self._classes.keys())


# Global registry
shape_registry = ShapeRegistry()


def resolve_route_class(
    shape: str | type[TreeNode],
    registry: ShapeRegistry | None = None,
) -> type[AutoRoute]:
    """Resolve a configured route shape to a class implementing ``AutoRoute``.

    Raises:
        InvalidConfigError: unknown shape, or a class that is not an
            ``AutoRoute`` subclass.
    """
    registry = registry or shape_registry
    node_class = registry.find(shape) if isinstance(shape, str) else shape
    if node_class is None:
        raise InvalidConfigError("route_shape", shape, f"Unknown route shape: {shape!r}")
    if not (isinstance(node_class, type) and issubclass(node_class, AutoRoute)):
        raise InvalidConfigError(
            "route_shape",
            shape,
            f'Auto route documents have to extend AutoRoute, "{getattr(node_class, "__qualname__", node_class)}" does not.',
        )
    return node_class


__all__ = [
    "ShapeRegistry",
    "shape_registry",
    "resolve_route_class",
]
