"""Document repository backends for the route tree.

- :class:`InMemoryDocumentRepository` — dict-backed, snapshot commit/rollback
- :class:`SQLAlchemyDocumentRepository` — one ORM session over ``route_nodes``

The SQLAlchemy backend is imported lazily so ``route_spine.core`` stays
importable without a database driver configured.
"""

from __future__ import annotations

from typing import Any

from route_spine.core.repositories.base import BaseDocumentRepository, NodeRecord
from route_spine.core.repositories.memory import InMemoryDocumentRepository


def __getattr__(name: str) -> Any:
    if name == "SQLAlchemyDocumentRepository":
        from route_spine.core.repositories.sql import SQLAlchemyDocumentRepository

        return SQLAlchemyDocumentRepository
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BaseDocumentRepository",
    "NodeRecord",
    "InMemoryDocumentRepository",
    "SQLAlchemyDocumentRepository",
]
