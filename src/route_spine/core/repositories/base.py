"""Unit-of-work base for document repositories.

Provides :class:`BaseDocumentRepository`, which implements the
:class:`~route_spine.core.protocols.DocumentRepository` contract on top of a
small set of record-storage hooks. Concrete backends only decide where
:class:`NodeRecord` rows live.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                     BaseDocumentRepository                         │
    │                                                                    │
    │   identity map: id → node     (one object per record per session)  │
    │   shapes: ShapeRegistry       (record.shape → node class)          │
    │   content: ContentStore       (content object ↔ content_id)        │
    │                                                                    │
    │   materialize(record) → node       dehydrate(node) → record        │
    │   flush()  → write loaded nodes' fields back to records            │
    │   commit() → flush + backend commit                                │
    ├────────────────────────────────────────────────────────────────────┤
    │   storage hooks (per backend)                                      │
    │   _get_record / _get_record_by_id / _insert_record /               │
    │   _update_record / _set_shape / _child_records / _move_records /   │
    │   _delete_records / _records_by_content / _commit / _rollback      │
    └────────────────────────────────────────────────────────────────────┘

A node's class is fixed when it is materialized. :meth:`rewrite_shape`
only changes the stored shape; the loaded object keeps its old class until
it is detached and loaded again with :meth:`reload`.

Tags:
    repository, unit-of-work, identity-map, route-tree
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from route_spine.core.errors import StorageError
from route_spine.core.logging import get_logger
from route_spine.core.models import AutoRoute, RouteType, TreeNode
from route_spine.core.paths import (
    ROOT_PATH,
    basename,
    is_descendant,
    join_path,
    parent_of,
    rebase,
    split_segments,
)
from route_spine.core.protocols import ContentStore
from route_spine.core.shapes import ShapeRegistry, shape_registry

logger = get_logger(__name__)

ROOT_ID = "root"


@dataclass
class NodeRecord:
    """Storage-level row for one node."""

    id: str
    path: str
    parent_path: str | None
    name: str
    shape: str
    content_id: str | None = None
    locale: str | None = None
    route_type: str | None = None
    redirect_target_id: str | None = None
    defaults: dict[str, Any] = field(default_factory=dict)


class BaseDocumentRepository(ABC):
    """Identity-mapped document repository over pluggable record storage.

    Parameters:
        content_store: Resolves content objects to identifiers and back.
        shapes: Shape registry. Defaults to the global registry.
    """

    def __init__(self, content_store: ContentStore, shapes: ShapeRegistry | None = None) -> None:
        self.content_store = content_store
        self.shapes = shapes or shape_registry
        self._identity: dict[str, TreeNode] = {}

    # -- Storage hooks -----------------------------------------------------

    @abstractmethod
    def _get_record(self, path: str) -> NodeRecord | None: ...

    @abstractmethod
    def _get_record_by_id(self, node_id: str) -> NodeRecord | None: ...

    @abstractmethod
    def _insert_record(self, record: NodeRecord) -> None: ...

    @abstractmethod
    def _update_record(self, record: NodeRecord) -> None:
        """Write every field except ``shape``."""

    @abstractmethod
    def _set_shape(self, node_id: str, shape: str) -> None: ...

    @abstractmethod
    def _child_records(self, path: str) -> list[NodeRecord]: ...

    @abstractmethod
    def _move_records(self, source_path: str, dest_path: str) -> None:
        """Rebase the record at *source_path* and all its descendants."""

    @abstractmethod
    def _delete_records(self, path: str) -> list[str]:
        """Delete the subtree at *path*; return the deleted ids."""

    @abstractmethod
    def _records_by_content(self, content_id: str) -> list[NodeRecord]: ...

    @abstractmethod
    def _commit(self) -> None: ...

    @abstractmethod
    def _rollback(self) -> None: ...

    # -- Materialization ---------------------------------------------------

    def _materialize(self, record: NodeRecord) -> TreeNode:
        if record.id in self._identity:
            return self._identity[record.id]

        node_class = self.shapes.get(record.shape)
        node = node_class(name=record.name, parent_path=record.parent_path, id=record.id)
        # Registered before resolving references so redirect cycles terminate
        self._identity[record.id] = node

        if isinstance(node, AutoRoute):
            if record.content_id is not None:
                node.content = self.content_store.resolve(record.content_id)
            node.locale = record.locale
            if record.route_type:
                node.route_type = RouteType(record.route_type)
            node.defaults = dict(record.defaults or {})
            if record.redirect_target_id is not None:
                target = self.find_by_identity(record.redirect_target_id)
                node.redirect_target = target if isinstance(target, AutoRoute) else None
        return node

    def _dehydrate(self, node: TreeNode) -> NodeRecord:
        record = NodeRecord(
            id=node.id or "",
            path=node.path,
            parent_path=node.parent_path,
            name=node.name,
            shape=self.shapes.shape_of(type(node)),
        )
        if isinstance(node, AutoRoute):
            if node.content is not None:
                record.content_id = self.content_store.identify(node.content)
            record.locale = node.locale
            record.route_type = RouteType(node.route_type).value
            if node.redirect_target is not None:
                record.redirect_target_id = node.redirect_target.id
            record.defaults = dict(node.defaults)
        return record

    def _resolve_shape(self, shape: type[TreeNode] | str) -> tuple[type[TreeNode], str]:
        if isinstance(shape, str):
            return self.shapes.get(shape), shape.lower()
        return shape, self.shapes.shape_of(shape)

    # -- Lookups -----------------------------------------------------------

    def find_by_path(self, path: str, shape: type[TreeNode] | None = None) -> TreeNode | None:
        record = self._get_record(join_path(path))
        if record is None:
            return None
        node = self._materialize(record)
        if shape is not None and not isinstance(node, shape):
            return None
        return node

    def find_by_identity(self, node_id: str) -> TreeNode | None:
        if node_id in self._identity:
            return self._identity[node_id]
        record = self._get_record_by_id(node_id)
        return self._materialize(record) if record is not None else None

    def children(self, node: TreeNode) -> list[TreeNode]:
        return [self._materialize(record) for record in self._child_records(node.path)]

    def find_referrers(self, content: Any, shape: type[TreeNode] = AutoRoute) -> list[TreeNode]:
        self.flush()
        content_id = self.content_store.identify(content)
        nodes = [self._materialize(record) for record in self._records_by_content(content_id)]
        return [node for node in nodes if isinstance(node, shape)]

    # -- Mutations ---------------------------------------------------------

    def create_child(self, parent: TreeNode, name: str, shape: type[TreeNode] | str) -> TreeNode:
        node_class, _ = self._resolve_shape(shape)
        if not name or "/" in name:
            raise StorageError(f"Invalid node name: {name!r}").with_context(path=parent.path)
        if self._get_record(parent.path) is None:
            raise StorageError(f"Parent node does not exist: {parent.path}").with_context(
                path=parent.path
            )

        node = node_class(name=name, parent_path=parent.path, id=uuid.uuid4().hex)
        if self._get_record(node.path) is not None:
            raise StorageError(f"A node already exists at {node.path}").with_context(path=node.path)

        self._insert_record(self._dehydrate(node))
        self._identity[node.id] = node
        logger.debug("node_created", path=node.path, shape=node_class.shape)
        return node

    def ensure_path(self, path: str) -> TreeNode:
        """Return the node at *path*, creating placeholder ancestors as needed."""
        node = self._ensure_root()
        for segment in split_segments(path):
            child = self.find_by_path(join_path(node.path, segment))
            node = child if child is not None else self.create_child(node, segment, "generic")
        return node

    def _ensure_root(self) -> TreeNode:
        record = self._get_record(ROOT_PATH)
        if record is None:
            record = NodeRecord(id=ROOT_ID, path=ROOT_PATH, parent_path=None, name="", shape="generic")
            self._insert_record(record)
        return self._materialize(record)

    def move(self, source_path: str, dest_path: str) -> None:
        source_path, dest_path = join_path(source_path), join_path(dest_path)
        if self._get_record(source_path) is None:
            raise StorageError(f"Cannot move missing node {source_path}").with_context(path=source_path)
        if self._get_record(dest_path) is not None:
            raise StorageError(f"A node already exists at {dest_path}").with_context(path=dest_path)
        if dest_path == source_path or is_descendant(dest_path, source_path):
            raise StorageError(f"Cannot move {source_path} into itself").with_context(path=dest_path)
        dest_parent = parent_of(dest_path)
        if dest_parent is None or self._get_record(dest_parent) is None:
            raise StorageError(f"Destination parent does not exist for {dest_path}").with_context(
                path=dest_path
            )

        self._move_records(source_path, dest_path)
        for node in self._identity.values():
            if node.path == source_path:
                node.parent_path, node.name = dest_parent, basename(dest_path)
            elif node.parent_path is not None and (
                node.parent_path == source_path or is_descendant(node.parent_path, source_path)
            ):
                node.parent_path = rebase(node.parent_path, source_path, dest_path)
        logger.debug("node_moved", source=source_path, dest=dest_path)

    def remove_subtree(self, path: str) -> None:
        path = join_path(path)
        if path == ROOT_PATH:
            raise StorageError("Cannot remove the root node").with_context(path=path)
        if self._get_record(path) is None:
            raise StorageError(f"Cannot remove missing node {path}").with_context(path=path)
        for node_id in self._delete_records(path):
            self._identity.pop(node_id, None)
        logger.debug("subtree_removed", path=path)

    def rewrite_shape(self, node: TreeNode, shape: type[TreeNode] | str) -> None:
        _, shape_id = self._resolve_shape(shape)
        if node.id is None or self._get_record_by_id(node.id) is None:
            raise StorageError(f"Cannot rewrite shape of unmanaged node {node.path}").with_context(
                path=node.path
            )
        self._set_shape(node.id, shape_id)
        logger.debug("shape_rewritten", path=node.path, shape=shape_id)

    def detach(self, node: TreeNode) -> None:
        """Forget *node*; unflushed changes on it are lost."""
        if node.id is not None:
            self._identity.pop(node.id, None)

    def reload(self, node: TreeNode) -> TreeNode | None:
        self.detach(node)
        return self.find_by_identity(node.id) if node.id is not None else None

    # -- Session -----------------------------------------------------------

    def flush(self) -> None:
        """Write field changes of every loaded node back to storage."""
        for node in list(self._identity.values()):
            if node.path == ROOT_PATH:
                continue
            self._update_record(self._dehydrate(node))

    def commit(self) -> None:
        self.flush()
        self._commit()
        logger.debug("session_committed", loaded=len(self._identity))

    def rollback(self) -> None:
        self._rollback()
        self._identity.clear()
        logger.debug("session_rolled_back")

    # -- Content passthroughs ----------------------------------------------

    def is_translatable(self, content: Any) -> bool:
        return self.content_store.is_translatable(content)

    def locales_for(self, content: Any) -> list[str]:
        return self.content_store.locales_for(content)

    def find_translation(self, type_name: str, content_id: str, locale: str) -> Any:
        return self.content_store.find_translation(type_name, content_id, locale)

    def content_identity(self, content: Any) -> str:
        return self.content_store.identify(content)

    def type_name(self, content: Any) -> str:
        return self.content_store.type_name(content)

    def real_class_name(self, class_name: str | type) -> str:
        return self.content_store.real_class_name(class_name)


__all__ = [
    "ROOT_ID",
    "NodeRecord",
    "BaseDocumentRepository",
]
