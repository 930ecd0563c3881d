"""SQLAlchemy-backed document repository.

Stores every node as a row of :class:`~route_spine.core.orm.tables.RouteNodeTable`
in one ORM session. Pending creates, moves and removals are visible to later
queries through the session's autoflush and become durable on :meth:`commit`.
Driver errors are wrapped in :class:`~route_spine.core.errors.StorageError`
with the original exception chained as ``cause``.

Usage::

    from route_spine.core.orm import create_route_engine, route_session_factory

    engine = create_route_engine("sqlite:///routes.db")
    repo = SQLAlchemyDocumentRepository(route_session_factory(engine)(), content_store)
    repo.create_schema()
    repo.ensure_path("/cms/routes")
    repo.commit()
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import or_, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from route_spine.core.errors import StorageError
from route_spine.core.logging import get_logger
from route_spine.core.orm.base import RouteSpineBase
from route_spine.core.orm.tables import RouteNodeTable
from route_spine.core.paths import ROOT_PATH, SEPARATOR, basename, parent_of, rebase
from route_spine.core.protocols import ContentStore
from route_spine.core.repositories.base import BaseDocumentRepository, NodeRecord
from route_spine.core.shapes import ShapeRegistry

logger = get_logger(__name__)


def _to_record(row: RouteNodeTable) -> NodeRecord:
    return NodeRecord(
        id=row.id,
        path=row.path,
        parent_path=row.parent_path,
        name=row.name,
        shape=row.shape,
        content_id=row.content_id,
        locale=row.locale,
        route_type=row.route_type,
        redirect_target_id=row.redirect_target_id,
        defaults=dict(row.defaults or {}),
    )


class SQLAlchemyDocumentRepository(BaseDocumentRepository):
    """Document repository over a SQLAlchemy ``Session``.

    Parameters:
        session: ORM session; the repository never closes it.
        content_store: Resolves content objects to identifiers and back.
        shapes: Shape registry. Defaults to the global registry.
    """

    def __init__(
        self,
        session: Session,
        content_store: ContentStore,
        shapes: ShapeRegistry | None = None,
    ) -> None:
        super().__init__(content_store, shapes)
        self.session = session

    @contextmanager
    def _driver_errors(self, action: str, path: str | None = None) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            # Locked or dropped connections are transient
            raise StorageError(
                f"Failed to {action}", retryable=isinstance(exc, OperationalError), cause=exc
            ).with_context(path=path) from exc

    def create_schema(self) -> None:
        """Create the ``route_nodes`` table and the root node."""
        with self._driver_errors("create schema"):
            RouteSpineBase.metadata.create_all(self.session.get_bind())
        self._ensure_root()
        self.commit()

    # -- Storage hooks -----------------------------------------------------

    def _row(self, node_id: str) -> RouteNodeTable | None:
        with self._driver_errors("load node"):
            return self.session.get(RouteNodeTable, node_id)

    def _subtree_query(self, path: str):
        prefix = SEPARATOR if path == ROOT_PATH else path + SEPARATOR
        return select(RouteNodeTable).where(
            or_(
                RouteNodeTable.path == path,
                RouteNodeTable.path.startswith(prefix, autoescape=True),
            )
        )

    def _get_record(self, path: str) -> NodeRecord | None:
        with self._driver_errors("find node", path):
            row = self.session.scalars(
                select(RouteNodeTable).where(RouteNodeTable.path == path)
            ).one_or_none()
        return _to_record(row) if row is not None else None

    def _get_record_by_id(self, node_id: str) -> NodeRecord | None:
        row = self._row(node_id)
        return _to_record(row) if row is not None else None

    def _insert_record(self, record: NodeRecord) -> None:
        with self._driver_errors("insert node", record.path):
            self.session.add(
                RouteNodeTable(
                    id=record.id,
                    path=record.path,
                    parent_path=record.parent_path,
                    name=record.name,
                    shape=record.shape,
                    content_id=record.content_id,
                    locale=record.locale,
                    route_type=record.route_type,
                    redirect_target_id=record.redirect_target_id,
                    defaults=dict(record.defaults),
                )
            )
            self.session.flush()

    def _update_record(self, record: NodeRecord) -> None:
        row = self._row(record.id)
        if row is None:
            return
        row.path = record.path
        row.parent_path = record.parent_path
        row.name = record.name
        row.content_id = record.content_id
        row.locale = record.locale
        row.route_type = record.route_type
        row.redirect_target_id = record.redirect_target_id
        row.defaults = dict(record.defaults)

    def _set_shape(self, node_id: str, shape: str) -> None:
        row = self._row(node_id)
        if row is not None:
            row.shape = shape

    def _child_records(self, path: str) -> list[NodeRecord]:
        with self._driver_errors("list children", path):
            rows = self.session.scalars(
                select(RouteNodeTable)
                .where(RouteNodeTable.parent_path == path)
                .order_by(RouteNodeTable.name)
            ).all()
        return [_to_record(row) for row in rows]

    def _move_records(self, source_path: str, dest_path: str) -> None:
        with self._driver_errors("move node", source_path):
            for row in self.session.scalars(self._subtree_query(source_path)).all():
                if row.path == source_path:
                    row.parent_path, row.name = parent_of(dest_path), basename(dest_path)
                else:
                    row.parent_path = rebase(row.parent_path or ROOT_PATH, source_path, dest_path)
                row.path = rebase(row.path, source_path, dest_path)
            self.session.flush()

    def _delete_records(self, path: str) -> list[str]:
        with self._driver_errors("remove node", path):
            rows = self.session.scalars(self._subtree_query(path)).all()
            removed = [row.id for row in rows]
            for row in rows:
                self.session.delete(row)
            self.session.flush()
        return removed

    def _records_by_content(self, content_id: str) -> list[NodeRecord]:
        with self._driver_errors("query referrers"):
            rows = self.session.scalars(
                select(RouteNodeTable).where(RouteNodeTable.content_id == content_id)
            ).all()
        return [_to_record(row) for row in rows]

    def _commit(self) -> None:
        with self._driver_errors("commit"):
            self.session.commit()

    def _rollback(self) -> None:
        with self._driver_errors("roll back"):
            self.session.rollback()


__all__ = [
    "SQLAlchemyDocumentRepository",
]
