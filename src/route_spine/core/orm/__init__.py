"""SQLAlchemy 2.0 ORM layer for the route tree.

Usage::

    from route_spine.core.orm import RouteSpineBase, create_route_engine

    engine = create_route_engine("sqlite:///routes.db")
    RouteSpineBase.metadata.create_all(engine)
"""

from route_spine.core.orm.base import RouteSpineBase, TimestampMixin
from route_spine.core.orm.session import (
    RouteSession,
    create_route_engine,
    route_session_factory,
)
from route_spine.core.orm.tables import RouteNodeTable

__all__ = [
    "RouteSpineBase",
    "TimestampMixin",
    "RouteNodeTable",
    "RouteSession",
    "create_route_engine",
    "route_session_factory",
]
