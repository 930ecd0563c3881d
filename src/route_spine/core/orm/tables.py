"""SQLAlchemy 2.0 table definitions for the route tree.

One table holds every node. ``path`` is unique, which is how the
repository enforces that exactly one node exists per path; a violation
surfaces as an ``IntegrityError`` at flush time.

Usage::

    from route_spine.core.orm import RouteSpineBase, create_route_engine

    engine = create_route_engine("sqlite:///routes.db")
    RouteSpineBase.metadata.create_all(engine)
"""

from __future__ import annotations

from sqlalchemy import JSON, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from route_spine.core.orm.base import RouteSpineBase, TimestampMixin


class RouteNodeTable(TimestampMixin, RouteSpineBase):
    __tablename__ = "route_nodes"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    path: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    parent_path: Mapped[str | None] = mapped_column(Text)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    shape: Mapped[str] = mapped_column(Text, nullable=False)
    content_id: Mapped[str | None] = mapped_column(Text)
    locale: Mapped[str | None] = mapped_column(Text)
    route_type: Mapped[str | None] = mapped_column(Text)
    redirect_target_id: Mapped[str | None] = mapped_column(Text)
    defaults: Mapped[dict | None] = mapped_column(JSON, default=dict)

    __table_args__ = (
        Index("ix_route_nodes_parent_path", "parent_path"),
        Index("ix_route_nodes_content_id", "content_id"),
    )

    def __repr__(self) -> str:
        return f"RouteNodeTable(path={self.path!r}, shape={self.shape!r})"
