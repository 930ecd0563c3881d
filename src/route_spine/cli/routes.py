"""
CLI: route tree commands (``init``, ``create``, ``find``, ``tree``,
``redirect``, ``migrate-children``, ``remove``).

Every command opens its own container, runs one adapter operation and
commits. Content items are referenced by id.
"""

from __future__ import annotations

from typing import Any

import typer

from route_spine.cli.utils import (
    fail,
    make_container,
    node_to_dict,
    output_result,
    parse_defaults,
    report_errors,
)
from route_spine.core.config import RouteSpineContainer
from route_spine.core.models import AutoRoute, TreeNode, UriContext


def _require_route(container: RouteSpineContainer, uri: str) -> AutoRoute:
    route = container.adapter.find_route_for_uri(uri)
    if route is None:
        fail(f"No route at {uri!r}")
    return route


def _walk(container: RouteSpineContainer, node: TreeNode) -> list[dict[str, Any]]:
    rows = []
    for child in container.repository.children(node):
        rows.append(node_to_dict(container, child))
        rows.extend(_walk(container, child))
    return rows


def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Create the schema and the route base path."""
    with make_container(database) as container, report_errors():
        node = container.provision_base_path()
        output_result(
            {"base_path": node.path, "database_url": container.settings.database_url},
            as_json=json_out,
            title="Route Tree Initialised",
        )


def create(
    uri: str = typer.Argument(..., help="URI relative to the base path"),
    content_id: str = typer.Option(..., "--content-id", "-c", help="Content identifier"),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale of the route"),
    default: list[str] | None = typer.Option(None, "--default", help="Route default KEY=VALUE"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Materialize a route for a content item."""
    defaults = parse_defaults(default)
    with make_container(database) as container, report_errors():
        content = container.content_store.resolve(content_id)
        context = UriContext(subject=content, uri=uri, locale=locale, defaults=defaults)
        route = container.adapter.create_auto_route(context, locale)
        container.repository.commit()
        output_result(node_to_dict(container, route), as_json=json_out, title="Route Created")


def find(
    uri: str = typer.Argument(..., help="URI relative to the base path"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the route at a URI."""
    with make_container(database) as container, report_errors():
        route = _require_route(container, uri)
        output_result(node_to_dict(container, route), as_json=json_out, title="Route")


def tree(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List every node below the base path."""
    with make_container(database) as container, report_errors():
        base_path = container.adapter.config.base_path
        base = container.repository.find_by_path(base_path)
        if base is None:
            fail(f"Base path {base_path} does not exist; run 'route-spine init'")
        output_result(_walk(container, base), as_json=json_out, title=base_path)


def redirect(
    source_uri: str = typer.Argument(..., help="Route that becomes a redirect"),
    target_uri: str = typer.Argument(..., help="Route it redirects to"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Turn a route into a redirect to another route."""
    with make_container(database) as container, report_errors():
        source = _require_route(container, source_uri)
        target = _require_route(container, target_uri)
        container.adapter.create_redirect_route(source, target)
        container.repository.commit()
        output_result(node_to_dict(container, source), as_json=json_out, title="Redirect Created")


def migrate_children(
    source_uri: str = typer.Argument(..., help="Route whose children move"),
    dest_uri: str = typer.Argument(..., help="Route that receives them"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Move the children of one route under another."""
    with make_container(database) as container, report_errors():
        source = _require_route(container, source_uri)
        dest = _require_route(container, dest_uri)
        container.adapter.migrate_auto_route_children(source, dest)
        container.repository.commit()
        children = [node_to_dict(container, child) for child in container.repository.children(dest)]
        output_result(children, as_json=json_out, title=dest.path)


def remove(
    uri: str = typer.Argument(..., help="URI relative to the base path"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Remove a route and everything below it."""
    with make_container(database) as container, report_errors():
        route = _require_route(container, uri)
        path = route.path
        container.adapter.remove_auto_route(route)
        output_result({"removed": path}, as_json=json_out, title="Route Removed")
