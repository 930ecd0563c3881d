"""
CLI layer for route-spine.

Provides a Typer application whose commands drive a
:class:`~route_spine.core.adapters.DocumentAdapter` over a SQLite route
tree. All routing logic lives in ``route_spine.core``; this package handles
argument parsing, error reporting and table / JSON output.

Entry point::

    route-spine --help
"""

from route_spine.cli.app import app

__all__ = ["app"]
