"""In-memory document repository.

Records live in a dict keyed by path. :meth:`commit` snapshots the working
set and :meth:`rollback` restores the last snapshot, so uncommitted creates,
moves and removals can be discarded the same way a database session would.

Examples:
    >>> from route_spine.core.content import InMemoryContentStore
    >>> repo = InMemoryDocumentRepository(InMemoryContentStore())
    >>> base = repo.ensure_path("/cms/routes")
    >>> repo.commit()
    >>> repo.find_by_path("/cms/routes") is base
    True
"""

from __future__ import annotations

import copy

from route_spine.core.errors import StorageError
from route_spine.core.paths import ROOT_PATH, basename, is_descendant, parent_of, rebase
from route_spine.core.protocols import ContentStore
from route_spine.core.repositories.base import BaseDocumentRepository, NodeRecord
from route_spine.core.shapes import ShapeRegistry


class InMemoryDocumentRepository(BaseDocumentRepository):
    """Dict-backed repository with snapshot commit/rollback."""

    def __init__(self, content_store: ContentStore, shapes: ShapeRegistry | None = None) -> None:
        super().__init__(content_store, shapes)
        self._records: dict[str, NodeRecord] = {}
        self._committed: dict[str, NodeRecord] = {}
        self._ensure_root()
        self._commit()

    def _get_record(self, path: str) -> NodeRecord | None:
        return self._records.get(path)

    def _get_record_by_id(self, node_id: str) -> NodeRecord | None:
        for record in self._records.values():
            if record.id == node_id:
                return record
        return None

    def _insert_record(self, record: NodeRecord) -> None:
        if record.path in self._records:
            raise StorageError(f"A node already exists at {record.path}").with_context(path=record.path)
        self._records[record.path] = record

    def _update_record(self, record: NodeRecord) -> None:
        current = self._get_record_by_id(record.id)
        if current is None:
            return
        if current.path != record.path:
            del self._records[current.path]
        record.shape = current.shape
        self._records[record.path] = record

    def _set_shape(self, node_id: str, shape: str) -> None:
        record = self._get_record_by_id(node_id)
        if record is not None:
            record.shape = shape

    def _child_records(self, path: str) -> list[NodeRecord]:
        children = [record for record in self._records.values() if record.parent_path == path]
        return sorted(children, key=lambda record: record.name)

    def _subtree(self, path: str) -> list[NodeRecord]:
        return [
            record
            for record in self._records.values()
            if record.path == path or is_descendant(record.path, path)
        ]

    def _move_records(self, source_path: str, dest_path: str) -> None:
        for record in self._subtree(source_path):
            del self._records[record.path]
            record.path = rebase(record.path, source_path, dest_path)
            if record.path == dest_path:
                record.parent_path, record.name = parent_of(dest_path), basename(dest_path)
            else:
                record.parent_path = rebase(record.parent_path or ROOT_PATH, source_path, dest_path)
            self._records[record.path] = record

    def _delete_records(self, path: str) -> list[str]:
        removed = self._subtree(path)
        for record in removed:
            del self._records[record.path]
        return [record.id for record in removed]

    def _records_by_content(self, content_id: str) -> list[NodeRecord]:
        return [record for record in self._records.values() if record.content_id == content_id]

    def _commit(self) -> None:
        self._committed = copy.deepcopy(self._records)

    def _rollback(self) -> None:
        self._records = copy.deepcopy(self._committed)


__all__ = [
    "InMemoryDocumentRepository",
]
