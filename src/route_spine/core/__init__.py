"""Route Spine Core -- route materialization over document repositories.

Manifesto:
    A routing engine decides which URIs a content item should be reachable
    under; something has to turn those URIs into persisted nodes. Every
    URI becomes a chain of nodes below a base path: placeholders for the
    intermediate segments, a route node at the head that points back to
    the content. The tree is reshaped in place (placeholders become routes,
    children move between routes) so node identity survives URI changes.

    - **Adapter contract:** The engine only sees ``AutoRouteAdapter``
    - **Unit of work:** Repositories batch changes until ``commit()``
    - **Shape is class:** A node's stored shape decides its class on load
    - **Explicit configuration:** Base path and route class are passed in

Architecture::

    Layer 1 -- Types & Errors
        errors.py          Structured error hierarchy (RouteSpineError, ...)
        models.py          TreeNode, PlaceholderNode, AutoRoute, UriContext
        paths.py           Path splitting / joining helpers
        shapes.py          Shape id -> node class registry
        protocols.py       DocumentRepository, ContentStore, RouteReferrer

    Layer 2 -- Storage
        content.py         In-memory content stores
        repositories/      Unit-of-work repositories (memory, SQLAlchemy)
        orm/               SQLAlchemy 2.0 table + engine/session helpers

    Layer 3 -- Routing
        materializer.py    PathMaterializer (create / convert / move / remove)
        comparator.py      RouteComparator (identity, locale, lookups)
        adapters/          AutoRouteAdapter, DocumentAdapter, registry

    Layer 4 -- Wiring
        config/            Settings, factories, lazy container
        logging.py         structlog configuration

Tags:
    route-spine, routing, route-tree, adapter, repository
"""

from route_spine.core.adapters import (
    AdapterRegistry,
    AutoRouteAdapter,
    DocumentAdapter,
    adapter_registry,
    get_adapter,
)
from route_spine.core.comparator import RouteComparator
from route_spine.core.content import (
    ContentReference,
    InMemoryContentStore,
    ReferenceContentStore,
)
from route_spine.core.errors import (
    ConfigurationError,
    ConflictError,
    ErrorCategory,
    InvalidConfigError,
    InvalidUriError,
    MigrationError,
    RouteSpineError,
    StorageError,
    UnknownAdapterError,
)
from route_spine.core.materializer import MaterializerConfig, PathMaterializer
from route_spine.core.models import (
    TAG_NO_MULTILANG,
    AutoRoute,
    Document,
    PlaceholderNode,
    RouteReferrerMixin,
    RouteType,
    TreeNode,
    UriContext,
)
from route_spine.core.protocols import ContentStore, DocumentRepository, RouteReferrer
from route_spine.core.repositories import InMemoryDocumentRepository
from route_spine.core.shapes import ShapeRegistry, shape_registry

__all__ = [
    # adapters
    "AdapterRegistry",
    "AutoRouteAdapter",
    "DocumentAdapter",
    "adapter_registry",
    "get_adapter",
    # routing
    "MaterializerConfig",
    "PathMaterializer",
    "RouteComparator",
    # content
    "ContentReference",
    "InMemoryContentStore",
    "ReferenceContentStore",
    # errors
    "ConfigurationError",
    "ConflictError",
    "ErrorCategory",
    "InvalidConfigError",
    "InvalidUriError",
    "MigrationError",
    "RouteSpineError",
    "StorageError",
    "UnknownAdapterError",
    # models
    "TAG_NO_MULTILANG",
    "AutoRoute",
    "Document",
    "PlaceholderNode",
    "RouteReferrerMixin",
    "RouteType",
    "TreeNode",
    "UriContext",
    # protocols
    "ContentStore",
    "DocumentRepository",
    "RouteReferrer",
    # storage
    "InMemoryDocumentRepository",
    "ShapeRegistry",
    "shape_registry",
]
