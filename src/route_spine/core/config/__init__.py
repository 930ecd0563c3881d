"""Configuration: settings, component factories and the lazy container."""

from route_spine.core.config.container import RouteSpineContainer
from route_spine.core.config.factory import (
    create_database_engine,
    create_repository,
    create_route_adapter,
)
from route_spine.core.config.settings import (
    MappingResource,
    PersistenceBackend,
    RoutingAutoSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "RouteSpineContainer",
    "create_database_engine",
    "create_repository",
    "create_route_adapter",
    "MappingResource",
    "PersistenceBackend",
    "RoutingAutoSettings",
    "clear_settings_cache",
    "get_settings",
]
