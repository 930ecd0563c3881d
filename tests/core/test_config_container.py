"""Tests for route_spine.core.config — factories and the lazy container.

Covers RouteSpineContainer lazy property creation, base path provisioning
for both backends, lifecycle management and the context manager protocol.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from route_spine.core.adapters import DocumentAdapter
from route_spine.core.config import (
    PersistenceBackend,
    RouteSpineContainer,
    RoutingAutoSettings,
    create_repository,
    create_route_adapter,
)
from route_spine.core.content import InMemoryContentStore
from route_spine.core.errors import UnknownAdapterError
from route_spine.core.models import AutoRoute, UriContext
from route_spine.core.repositories import InMemoryDocumentRepository, SQLAlchemyDocumentRepository


@pytest.fixture
def memory_settings() -> RoutingAutoSettings:
    return RoutingAutoSettings(route_basepath="/routes")


@pytest.fixture
def sql_settings() -> RoutingAutoSettings:
    return RoutingAutoSettings(
        route_basepath="/routes",
        persistence_backend="sqlalchemy",
        database_url="sqlite:///:memory:",
    )


class TestFactories:
    def test_memory_repository(self, memory_settings):
        repo = create_repository(memory_settings, InMemoryContentStore())
        assert isinstance(repo, InMemoryDocumentRepository)

    def test_sql_repository_needs_session(self, sql_settings):
        with pytest.raises(ValueError, match="session"):
            create_repository(sql_settings, InMemoryContentStore())

    def test_sql_repository(self, sql_settings):
        repo = create_repository(sql_settings, InMemoryContentStore(), session=MagicMock())
        assert isinstance(repo, SQLAlchemyDocumentRepository)

    def test_adapter_from_settings(self, memory_settings, memory_repo):
        adapter = create_route_adapter(memory_settings, memory_repo)
        assert isinstance(adapter, DocumentAdapter)
        assert adapter.config.base_path == "/routes"
        assert adapter.config.route_class is AutoRoute

    def test_unknown_adapter(self, memory_repo):
        settings = RoutingAutoSettings(adapter="phpcr")
        with pytest.raises(UnknownAdapterError):
            create_route_adapter(settings, memory_repo)


class TestRouteSpineContainer:
    def test_init(self):
        c = RouteSpineContainer()
        assert c._settings is None
        assert c._engine is None
        assert c._session is None
        assert c._repository is None
        assert c._adapter is None

    @patch("route_spine.core.config.container.get_settings")
    def test_settings_lazy_creation(self, mock_get):
        mock_get.return_value = RoutingAutoSettings()
        c = RouteSpineContainer()
        assert c.settings is mock_get.return_value
        mock_get.assert_called_once()

    @patch("route_spine.core.config.container.create_database_engine")
    def test_engine_cached(self, mock_create, sql_settings):
        mock_create.return_value = MagicMock()
        c = RouteSpineContainer(sql_settings)
        assert c.engine is c.engine
        mock_create.assert_called_once_with(sql_settings)

    def test_content_store_provided(self, memory_settings):
        store = InMemoryContentStore()
        assert RouteSpineContainer(memory_settings, content_store=store).content_store is store

    def test_memory_backend(self, memory_settings, make_article):
        c = RouteSpineContainer(memory_settings)
        base = c.provision_base_path()
        assert base.path == "/routes"
        assert isinstance(c.repository, InMemoryDocumentRepository)
        assert c._engine is None

        route = c.adapter.create_auto_route(UriContext(make_article("a"), "/a/b", "en"), "en")
        assert route.path == "/routes/a/b"

    def test_sql_backend(self, sql_settings, make_article):
        with RouteSpineContainer(sql_settings) as c:
            c.provision_base_path()
            assert isinstance(c.repository, SQLAlchemyDocumentRepository)

            article = make_article("a")
            c.adapter.create_auto_route(UriContext(article, "/a"), None)
            c.repository.commit()
            c.repository.rollback()
            assert c.adapter.find_route_for_uri("/a").content is article
        assert c._session is None
        assert c._engine is None

    def test_provision_idempotent(self, memory_settings):
        c = RouteSpineContainer(memory_settings)
        assert c.provision_base_path() is c.provision_base_path()

    def test_close_without_resources(self, memory_settings):
        c = RouteSpineContainer(memory_settings)
        c.close()
        assert c._engine is None

    def test_backend_enum(self, sql_settings):
        assert sql_settings.persistence_backend is PersistenceBackend.SQLALCHEMY
