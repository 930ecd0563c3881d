"""
Factory functions that create component instances from settings.

Each factory imports SQLAlchemy lazily so that the in-memory backend works
without touching the ORM layer.

Features:
    - ``create_database_engine()`` — SQLAlchemy engine from settings
    - ``create_repository()`` — in-memory or SQLAlchemy document repository
    - ``create_route_adapter()`` — adapter from the registry

Tags:
    route-spine, configuration, factory-pattern, lazy-imports, sqlalchemy
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from route_spine.core.adapters.base import AutoRouteAdapter
from route_spine.core.adapters.registry import get_adapter
from route_spine.core.materializer import MaterializerConfig
from route_spine.core.protocols import ContentStore
from route_spine.core.repositories.base import BaseDocumentRepository

from .settings import PersistenceBackend

if TYPE_CHECKING:
    from .settings import RoutingAutoSettings


def create_database_engine(settings: RoutingAutoSettings) -> Any:
    """Create a SQLAlchemy :class:`~sqlalchemy.engine.Engine`."""
    from route_spine.core.orm.session import create_route_engine

    return create_route_engine(settings.database_url, echo=settings.database_echo)


def create_repository(
    settings: RoutingAutoSettings,
    content_store: ContentStore,
    *,
    session: Any | None = None,
) -> BaseDocumentRepository:
    """Create the document repository selected by *settings.persistence_backend*."""
    match settings.persistence_backend:
        case PersistenceBackend.MEMORY:
            from route_spine.core.repositories.memory import InMemoryDocumentRepository

            return InMemoryDocumentRepository(content_store)
        case PersistenceBackend.SQLALCHEMY:
            from route_spine.core.repositories.sql import SQLAlchemyDocumentRepository

            if session is None:
                raise ValueError("The sqlalchemy persistence backend requires a session")
            return SQLAlchemyDocumentRepository(session, content_store)
        case _:
            raise ValueError(f"Unknown persistence backend: {settings.persistence_backend}")


def create_route_adapter(
    settings: RoutingAutoSettings,
    repository: BaseDocumentRepository,
) -> AutoRouteAdapter:
    """Create the adapter named by *settings* over *repository*."""
    return get_adapter(
        settings.adapter_name,
        repository=repository,
        config=MaterializerConfig.from_settings(settings),
    )
