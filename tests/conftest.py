"""
Shared pytest fixtures for route-spine tests.

This module provides:
- Content fixtures (an ``Article`` class that tracks its routes)
- Repository fixtures for both backends (dict-backed and in-memory SQLite)
- A ``repo`` fixture parametrized over both backends
- Settings cache cleanup for test isolation

Usage:
    def test_something(adapter, article):
        route = adapter.create_auto_route(UriContext(article, "/a/b"), "en")
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from route_spine.core.adapters import DocumentAdapter
from route_spine.core.config import clear_settings_cache
from route_spine.core.content import InMemoryContentStore
from route_spine.core.materializer import MaterializerConfig
from route_spine.core.models import RouteReferrerMixin
from route_spine.core.orm import create_route_engine, route_session_factory
from route_spine.core.repositories import InMemoryDocumentRepository
from route_spine.core.repositories.sql import SQLAlchemyDocumentRepository

BASE_PATH = "/routes"


# =============================================================================
# Content
# =============================================================================


class Article(RouteReferrerMixin):
    """Content item that records the routes pointing at it."""

    def __init__(self, title: str, id: str | None = None):
        self.title = title
        self.id = id

    def __repr__(self) -> str:
        return f"Article({self.title!r})"


class Page:
    """Content item without back-references."""

    def __init__(self, title: str):
        self.title = title


@pytest.fixture
def article() -> Article:
    return Article("Hello world")


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


# =============================================================================
# Repositories
# =============================================================================


@pytest.fixture
def memory_repo(content_store) -> InMemoryDocumentRepository:
    repo = InMemoryDocumentRepository(content_store)
    repo.ensure_path(BASE_PATH)
    repo.commit()
    return repo


@pytest.fixture
def sql_engine():
    engine = create_route_engine("sqlite:///:memory:")
    yield engine
    engine.dispose()


@pytest.fixture
def sql_session(sql_engine):
    session = route_session_factory(sql_engine)()
    yield session
    session.close()


@pytest.fixture
def sql_repo(sql_session, content_store) -> SQLAlchemyDocumentRepository:
    repo = SQLAlchemyDocumentRepository(sql_session, content_store)
    repo.create_schema()
    repo.ensure_path(BASE_PATH)
    repo.commit()
    return repo


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    """Document repository, once per backend."""
    return request.getfixturevalue(f"{request.param}_repo")


@pytest.fixture
def adapter(repo) -> DocumentAdapter:
    return DocumentAdapter(repo, MaterializerConfig(base_path=BASE_PATH))


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_settings() -> Generator[None, None, None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_article():
    """Factory for ``Article`` content items."""
    return Article


@pytest.fixture
def page() -> Page:
    return Page("About")
