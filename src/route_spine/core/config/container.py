"""
Lazy-initialised dependency container.

:class:`RouteSpineContainer` holds the engine, session, content store,
repository and adapter, creating each on first access.

Usage::

    from route_spine.core.config import RouteSpineContainer

    with RouteSpineContainer(get_settings(persistence_backend="sqlalchemy")) as c:
        c.provision_base_path()
        route = c.adapter.create_auto_route(ctx, "en")
        c.repository.commit()
"""

from __future__ import annotations

from typing import Any

from route_spine.core.adapters.base import AutoRouteAdapter
from route_spine.core.content import InMemoryContentStore
from route_spine.core.logging import get_logger
from route_spine.core.models import TreeNode
from route_spine.core.protocols import ContentStore
from route_spine.core.repositories.base import BaseDocumentRepository

from .factory import create_database_engine, create_repository, create_route_adapter
from .settings import PersistenceBackend, RoutingAutoSettings, get_settings

logger = get_logger(__name__)


class RouteSpineContainer:
    """Lazy-initialised dependency container.

    Components are created on first property access and disposed via
    :meth:`close` (or the context-manager protocol).
    """

    def __init__(
        self,
        settings: RoutingAutoSettings | None = None,
        *,
        content_store: ContentStore | None = None,
    ) -> None:
        self._settings = settings
        self._content_store = content_store
        self._engine: Any | None = None
        self._session: Any | None = None
        self._repository: BaseDocumentRepository | None = None
        self._adapter: AutoRouteAdapter | None = None

    # ── Properties (lazy) ────────────────────────────────────────

    @property
    def settings(self) -> RoutingAutoSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def engine(self) -> Any:
        """SQLAlchemy :class:`~sqlalchemy.engine.Engine`."""
        if self._engine is None:
            self._engine = create_database_engine(self.settings)
        return self._engine

    @property
    def session(self) -> Any:
        """ORM session for the SQLAlchemy backend."""
        if self._session is None:
            from route_spine.core.orm.session import route_session_factory

            self._session = route_session_factory(self.engine)()
        return self._session

    @property
    def content_store(self) -> ContentStore:
        if self._content_store is None:
            self._content_store = InMemoryContentStore()
        return self._content_store

    @property
    def repository(self) -> BaseDocumentRepository:
        if self._repository is None:
            session = None
            if self.settings.persistence_backend == PersistenceBackend.SQLALCHEMY:
                session = self.session
            self._repository = create_repository(self.settings, self.content_store, session=session)
        return self._repository

    @property
    def adapter(self) -> AutoRouteAdapter:
        if self._adapter is None:
            self._adapter = create_route_adapter(self.settings, self.repository)
        return self._adapter

    # ── Provisioning ─────────────────────────────────────────────

    def provision_base_path(self) -> TreeNode:
        """Create the schema (SQL backend) and the base path, then commit."""
        repository = self.repository
        create_schema = getattr(repository, "create_schema", None)
        if create_schema is not None:
            create_schema()
        node = repository.ensure_path(self.settings.route_basepath)
        repository.commit()
        logger.info("base_path_provisioned", path=node.path)
        return node

    # ── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        """Dispose of managed resources."""
        if self._session is not None:
            self._session.close()
            self._session = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> RouteSpineContainer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
