"""Tests for route_spine.core.config.settings.

Covers:
- RoutingAutoSettings defaults
- Environment variable override (ROUTING_AUTO_ prefix)
- Field validation and normalization
- get_settings() caching
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from route_spine.core.config.settings import (
    MappingResource,
    PersistenceBackend,
    RoutingAutoSettings,
    clear_settings_cache,
    get_settings,
)


class TestDefaults:
    def test_route_tree(self):
        s = RoutingAutoSettings()
        assert s.route_basepath == "/cms/routes"
        assert s.route_shape == "auto_route"

    def test_adapter_implicit(self):
        s = RoutingAutoSettings()
        assert s.adapter is None
        assert s.adapter_name == "document"

    def test_persistence(self):
        s = RoutingAutoSettings()
        assert s.persistence_backend == PersistenceBackend.MEMORY
        assert s.database_url == "sqlite:///data/routes.db"
        assert s.is_sqlite
        assert s.database_echo is False

    def test_mapping(self):
        s = RoutingAutoSettings()
        assert s.auto_mapping is True
        assert s.mapping_resources == []

    def test_misc(self):
        s = RoutingAutoSettings()
        assert s.prune_referrers_on_remove is False
        assert s.log_level == "WARNING"
        assert s.log_format == "console"


class TestEnvOverride:
    def test_basepath_from_env(self, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_ROUTE_BASEPATH", "/site/routes/")
        assert RoutingAutoSettings().route_basepath == "/site/routes"

    def test_adapter_from_env(self, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_ADAPTER", "custom")
        assert RoutingAutoSettings().adapter_name == "custom"

    def test_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_PERSISTENCE_BACKEND", "sqlalchemy")
        monkeypatch.setenv("ROUTING_AUTO_DATABASE_URL", "postgresql://localhost/routes")
        s = RoutingAutoSettings()
        assert s.persistence_backend == PersistenceBackend.SQLALCHEMY
        assert not s.is_sqlite

    def test_bool_from_env(self, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_PRUNE_REFERRERS_ON_REMOVE", "true")
        assert RoutingAutoSettings().prune_referrers_on_remove is True

    def test_unprefixed_ignored(self, monkeypatch):
        monkeypatch.setenv("ROUTE_BASEPATH", "/elsewhere")
        assert RoutingAutoSettings().route_basepath == "/cms/routes"


class TestValidation:
    @pytest.mark.parametrize("value", ["", "   ", "relative/path"])
    def test_bad_basepath(self, value):
        with pytest.raises(ValidationError):
            RoutingAutoSettings(route_basepath=value)

    def test_bad_backend(self):
        with pytest.raises(ValidationError):
            RoutingAutoSettings(persistence_backend="redis")

    def test_bad_log_format(self):
        with pytest.raises(ValidationError):
            RoutingAutoSettings(log_format="xml")

    def test_log_format_case_insensitive(self):
        assert RoutingAutoSettings(log_format="CONSOLE").log_format == "console"

    def test_mapping_resources_normalized(self):
        s = RoutingAutoSettings(
            mapping_resources=["routes.yml", {"path": "routes.xml", "type": "xml"}]
        )
        assert s.mapping_resources == [
            MappingResource(path="routes.yml"),
            MappingResource(path="routes.xml", type="xml"),
        ]
        assert s.mapping_resources[0].type is None

    def test_single_mapping_resource(self):
        s = RoutingAutoSettings(mapping_resources="routes.yml")
        assert [r.path for r in s.mapping_resources] == ["routes.yml"]


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self):
        first = get_settings()
        assert get_settings(_force_reload=True) is not first

    def test_overrides(self):
        s = get_settings(route_basepath="/other")
        assert s.route_basepath == "/other"
        assert get_settings() is not s

    def test_clear_cache(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("ROUTING_AUTO_ROUTE_SHAPE", "custom")
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings().route_shape == "custom"
