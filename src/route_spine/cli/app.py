"""
Root Typer application for the route-spine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from route_spine.cli import routes
from route_spine.core.config import get_settings
from route_spine.core.logging import configure_logging

app = Typer(
    name="route-spine",
    help="route-spine — automatic route trees for document repositories.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from route_spine import __version__

        try:
            v = pkg_version("route-spine")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"route-spine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level [default: ROUTING_AUTO_LOG_LEVEL]."
    ),
    log_json: bool = typer.Option(
        False, "--log-json", help="Emit JSON logs [default: ROUTING_AUTO_LOG_FORMAT]."
    ),
) -> None:
    """route-spine CLI — materialize, inspect and reshape route trees."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=log_json or settings.log_format == "json",
    )


# ── Command registration ─────────────────────────────────────────────────

app.command("init")(routes.init)
app.command("create")(routes.create)
app.command("find")(routes.find)
app.command("tree")(routes.tree)
app.command("redirect")(routes.redirect)
app.command("migrate-children")(routes.migrate_children)
app.command("remove")(routes.remove)
