"""Route adapter registry and factory.

Manifesto:
    Callers should never hard-code adapter class names. The registry maps
    adapter names to classes, and ``get_adapter()`` builds a configured
    instance. The ``adapter`` setting overrides the implicit choice.

Features:
    - ``AdapterRegistry`` singleton with pre-registered defaults
    - ``register()`` for custom / third-party adapters
    - ``get_adapter()`` factory: name + repository + config → adapter

Tags:
    route-spine, adapter, registry, factory, singleton
"""

from __future__ import annotations

from typing import Any

from route_spine.core.errors import UnknownAdapterError

from .base import AutoRouteAdapter
from .document import DocumentAdapter

DEFAULT_ADAPTER = "document"


class AdapterRegistry:
    """
    Registry for route adapter factories.

    Pre-registered adapters:
    - ``document`` — :class:`DocumentAdapter`
    """

    def __init__(self):
        self._factories: dict[str, type[AutoRouteAdapter]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories[DEFAULT_ADAPTER] = DocumentAdapter

    def register(self, name: str, adapter_class: type[AutoRouteAdapter]) -> None:
        """Register an adapter factory."""
        self._factories[name.lower()] = adapter_class

    def create(self, name: str, **kwargs: Any) -> AutoRouteAdapter:
        """Create an adapter by name."""
        name = name.lower()
        if name not in self._factories:
            raise UnknownAdapterError(name)
        return self._factories[name](**kwargs)

    def list_adapters(self) -> list[str]:
        """List registered adapter names."""
        return sorted(self._factories.keys())


# Global registry
adapter_registry = AdapterRegistry()


def get_adapter(name: str | None = None, **kwargs: Any) -> AutoRouteAdapter:
    """
    Get a route adapter by name (``document`` when *name* is None).

    Usage:
        adapter = get_adapter(repository=repo, config=MaterializerConfig())
        adapter = get_adapter("document", repository=repo)
    """
    return adapter_registry.create(name or DEFAULT_ADAPTER, **kwargs)


__all__ = [
    "DEFAULT_ADAPTER",
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
