"""
CLI utility helpers — container setup, error reporting and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.engine import make_url

from route_spine.core.config import PersistenceBackend, RouteSpineContainer, get_settings
from route_spine.core.content import ReferenceContentStore
from route_spine.core.errors import RouteSpineError, categorize_error, is_retryable
from route_spine.core.models import AutoRoute, TreeNode

console = Console()
err_console = Console(stderr=True)


# ── Container helper ─────────────────────────────────────────────────────


def make_container(database: str | None = None) -> RouteSpineContainer:
    """Container over the SQLite route tree at *database*.

    Falls back to the configured ``database_url`` when *database* is None.
    Content is referenced by id only.
    """
    settings = get_settings()
    url = f"sqlite:///{database}" if database else settings.database_url
    settings = settings.model_copy(
        update={"persistence_backend": PersistenceBackend.SQLALCHEMY, "database_url": url}
    )

    if settings.is_sqlite:
        db_file = make_url(url).database
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    return RouteSpineContainer(settings, content_store=ReferenceContentStore())


@contextmanager
def report_errors() -> Iterator[None]:
    """Print route-spine errors and exit with status 1."""
    try:
        yield
    except RouteSpineError as exc:
        category = categorize_error(exc)
        err_console.print(f"[bold red]Error[/bold red] ({category.value}): {exc.message}")
        if is_retryable(exc):
            err_console.print("[dim]The operation may succeed if retried.[/dim]")
        raise typer.Exit(code=1) from exc


def fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red]: {message}")
    raise typer.Exit(code=1)


def parse_defaults(values: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` options into a dict."""
    defaults: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--default")
        defaults[key] = value
    return defaults


# ── Node serialization ───────────────────────────────────────────────────


def node_to_dict(container: RouteSpineContainer, node: TreeNode) -> dict[str, Any]:
    """Plain-dict view of a node for table / JSON output."""
    repository = container.repository
    data: dict[str, Any] = {
        "path": node.path,
        "shape": repository.shapes.shape_of(type(node)),
    }
    if isinstance(node, AutoRoute):
        data["content_id"] = (
            repository.content_identity(node.content) if node.content is not None else None
        )
        data["locale"] = node.locale
        data["route_type"] = node.route_type.value
        data["redirect_target"] = node.redirect_target.path if node.redirect_target else None
        data["defaults"] = dict(node.defaults)
    return data


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_result(data: Any, *, as_json: bool = False, title: str = "") -> None:
    """Render a dict or list of dicts to the terminal."""
    if as_json:
        payload = _to_dict(data) if not isinstance(data, list | tuple) else [_to_dict(d) for d in data]
        console.print_json(json.dumps(payload, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        _print_table(data, title=title)
    else:
        _print_dict(_to_dict(data), title=title)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    """Render a list of dicts as a Rich table (columns from the widest row)."""
    rows = [_to_dict(item) for item in items]
    columns: list[str] = []
    for row in rows:
        columns.extend(key for key in row if key not in columns)

    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(col, "")) for col in columns))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
