"""
Tests for the route-spine CLI.

Every command runs against a fresh SQLite file under ``tmp_path``.
"""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from route_spine.cli.app import app
from route_spine.cli.utils import parse_defaults, report_errors
from route_spine.core.errors import ConflictError, StorageError

runner = CliRunner()


def _json(result) -> object:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.fixture
def db(tmp_path) -> str:
    path = str(tmp_path / "routes.db")
    result = runner.invoke(app, ["init", "--database", path])
    assert result.exit_code == 0, result.output
    return path


def _create(db, uri, content_id, *extra):
    return runner.invoke(app, ["create", uri, "--content-id", content_id, "--database", db, *extra])


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "route-spine" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "route-spine" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)

    @pytest.mark.parametrize(
        "command", ["init", "create", "find", "tree", "redirect", "migrate-children", "remove"]
    )
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0
        assert "--database" in result.output

    def test_logging_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("ROUTING_AUTO_LOG_FORMAT", "json")
        configure = MagicMock()
        monkeypatch.setattr(sys.modules["route_spine.cli.app"], "configure_logging", configure)

        result = runner.invoke(app, ["init", "--database", str(tmp_path / "routes.db")])
        assert result.exit_code == 0, result.output
        configure.assert_called_once_with(level="DEBUG", json_format=True)

    def test_logging_options_override_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_LOG_LEVEL", "DEBUG")
        configure = MagicMock()
        monkeypatch.setattr(sys.modules["route_spine.cli.app"], "configure_logging", configure)

        result = runner.invoke(
            app, ["--log-level", "ERROR", "--log-json", "init", "--database", str(tmp_path / "r.db")]
        )
        assert result.exit_code == 0, result.output
        configure.assert_called_once_with(level="ERROR", json_format=True)

    def test_logging_defaults(self, tmp_path, monkeypatch):
        configure = MagicMock()
        monkeypatch.setattr(sys.modules["route_spine.cli.app"], "configure_logging", configure)

        runner.invoke(app, ["init", "--database", str(tmp_path / "routes.db")])
        configure.assert_called_once_with(level="WARNING", json_format=False)


class TestInit:
    def test_init_json(self, tmp_path):
        path = str(tmp_path / "nested" / "routes.db")
        data = _json(runner.invoke(app, ["init", "--database", path, "--json"]))
        assert data["base_path"] == "/cms/routes"
        assert data["database_url"] == f"sqlite:///{path}"

    def test_init_twice(self, db):
        result = runner.invoke(app, ["init", "--database", db])
        assert result.exit_code == 0

    def test_base_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ROUTING_AUTO_ROUTE_BASEPATH", "/site/routes")
        path = str(tmp_path / "routes.db")
        data = _json(runner.invoke(app, ["init", "--database", path, "--json"]))
        assert data["base_path"] == "/site/routes"


class TestCreate:
    def test_create(self, db):
        data = _json(_create(db, "a/b/c", "post-1", "--locale", "en", "--json"))
        assert data["path"] == "/cms/routes/a/b/c"
        assert data["shape"] == "auto_route"
        assert data["content_id"] == "post-1"
        assert data["locale"] == "en"
        assert data["route_type"] == "primary"
        assert data["redirect_target"] is None

    def test_create_with_defaults(self, db):
        data = _json(
            _create(db, "feed", "post-1", "--default", "_format=rss", "--default", "page=1", "--json")
        )
        assert data["defaults"] == {"_format": "rss", "page": "1"}

    def test_create_table_output(self, db):
        result = _create(db, "hello", "post-1")
        assert result.exit_code == 0
        assert "Route Created" in result.stdout

    def test_conflict(self, db):
        assert _create(db, "a", "post-1").exit_code == 0
        result = _create(db, "a", "post-2")
        assert result.exit_code == 1
        assert "CONFLICT" in result.output

    def test_repeat_create_is_idempotent(self, db):
        first = _json(_create(db, "a", "post-1", "--locale", "en", "--json"))
        second = _json(_create(db, "a", "post-1", "--locale", "en", "--json"))
        assert second["path"] == first["path"] == "/cms/routes/a"
        tree = _json(runner.invoke(app, ["tree", "--database", db, "--json"]))
        assert [n["path"] for n in tree] == ["/cms/routes/a"]

    def test_placeholder_migrated(self, db):
        _create(db, "a/b", "post-1")
        data = _json(_create(db, "a", "post-2", "--json"))
        assert data["shape"] == "auto_route"
        assert data["content_id"] == "post-2"

    def test_empty_uri(self, db):
        result = _create(db, "/", "post-1")
        assert result.exit_code == 1
        assert "VALIDATION" in result.output

    def test_bad_default(self, db):
        result = _create(db, "a", "post-1", "--default", "novalue")
        assert result.exit_code == 2

    def test_without_init(self, tmp_path):
        result = _create(str(tmp_path / "empty.db"), "a", "post-1")
        assert result.exit_code == 1


class TestFindAndTree:
    def test_find(self, db):
        _create(db, "a/b", "post-1", "--locale", "de")
        data = _json(runner.invoke(app, ["find", "a/b", "--database", db, "--json"]))
        assert data["path"] == "/cms/routes/a/b"
        assert data["locale"] == "de"
        assert data["content_id"] == "post-1"

    def test_find_missing(self, db):
        result = runner.invoke(app, ["find", "nope", "--database", db])
        assert result.exit_code == 1

    def test_find_placeholder(self, db):
        _create(db, "a/b", "post-1")
        result = runner.invoke(app, ["find", "a", "--database", db])
        assert result.exit_code == 1

    def test_tree(self, db):
        _create(db, "a/b", "post-1")
        _create(db, "c", "post-2")
        data = _json(runner.invoke(app, ["tree", "--database", db, "--json"]))
        assert [(n["path"], n["shape"]) for n in data] == [
            ("/cms/routes/a", "generic"),
            ("/cms/routes/a/b", "auto_route"),
            ("/cms/routes/c", "auto_route"),
        ]

    def test_tree_empty(self, db):
        result = runner.invoke(app, ["tree", "--database", db])
        assert result.exit_code == 0
        assert "No items" in result.stdout


class TestReshape:
    def test_redirect(self, db):
        _create(db, "old", "post-1")
        _create(db, "new", "post-1")
        data = _json(runner.invoke(app, ["redirect", "old", "new", "--database", db, "--json"]))
        assert data["route_type"] == "redirect"
        assert data["redirect_target"] == "/cms/routes/new"

        reloaded = _json(runner.invoke(app, ["find", "old", "--database", db, "--json"]))
        assert reloaded["route_type"] == "redirect"
        assert reloaded["redirect_target"] == "/cms/routes/new"

    def test_redirect_missing_target(self, db):
        _create(db, "old", "post-1")
        result = runner.invoke(app, ["redirect", "old", "nope", "--database", db])
        assert result.exit_code == 1

    def test_migrate_children(self, db):
        _create(db, "a", "post-1")
        _create(db, "a/x", "post-2")
        _create(db, "b", "post-3")
        data = _json(runner.invoke(app, ["migrate-children", "a", "b", "--database", db, "--json"]))
        assert [n["path"] for n in data] == ["/cms/routes/b/x"]

        moved = _json(runner.invoke(app, ["find", "b/x", "--database", db, "--json"]))
        assert moved["content_id"] == "post-2"

    def test_migrate_children_collision(self, db):
        _create(db, "a", "post-1")
        _create(db, "a/x", "post-2")
        _create(db, "b", "post-3")
        _create(db, "b/x", "post-4")
        result = runner.invoke(app, ["migrate-children", "a", "b", "--database", db])
        assert result.exit_code == 1
        assert "CONFLICT" in result.output

    def test_remove(self, db):
        _create(db, "a/b", "post-1")
        _create(db, "a/b/c", "post-2")
        data = _json(runner.invoke(app, ["remove", "a/b", "--database", db, "--json"]))
        assert data == {"removed": "/cms/routes/a/b"}

        assert runner.invoke(app, ["find", "a/b/c", "--database", db]).exit_code == 1
        tree = _json(runner.invoke(app, ["tree", "--database", db, "--json"]))
        assert [n["path"] for n in tree] == ["/cms/routes/a"]


class TestParseDefaults:
    def test_parse(self):
        assert parse_defaults(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}
        assert parse_defaults(None) == {}


class TestReportErrors:
    def test_category_printed(self, capsys):
        with pytest.raises(typer.Exit) as exc_info:
            with report_errors():
                raise ConflictError("taken")
        assert exc_info.value.exit_code == 1
        err = capsys.readouterr().err
        assert "(CONFLICT): taken" in err
        assert "retried" not in err

    def test_retryable_hint(self, capsys):
        with pytest.raises(typer.Exit):
            with report_errors():
                raise StorageError("database is locked", retryable=True)
        assert "may succeed if retried" in capsys.readouterr().err
