"""Route adapters exposed to the reconciliation engine."""

from route_spine.core.adapters.base import AutoRouteAdapter
from route_spine.core.adapters.document import DocumentAdapter
from route_spine.core.adapters.registry import (
    DEFAULT_ADAPTER,
    AdapterRegistry,
    adapter_registry,
    get_adapter,
)

__all__ = [
    "AutoRouteAdapter",
    "DocumentAdapter",
    "DEFAULT_ADAPTER",
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
