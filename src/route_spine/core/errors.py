"""
Structured error types for route-spine.

Every failure the route materialization layer can surface is a
``RouteSpineError`` subclass carrying a category, a retry flag, structured
context and an optional chained cause. Nothing in the core retries; the
``retryable`` flag exists so the reconciliation engine (or whatever drives it)
can decide.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure mode of the tree
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Rich Context:** Errors carry the offending path and node type
    - **Error Chaining:** Repository driver errors are preserved as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       RouteSpineError                            │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigurationError   ConflictError     MigrationError          │
        │  (CONFIG)             (CONFLICT)        (MIGRATION)             │
        │       │                                                          │
        │  InvalidConfigError   StorageError      InvalidUriError         │
        │  UnknownAdapterError  (STORAGE)         (VALIDATION)            │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = ConflictError(
    ...     "Existing node at /cms/routes/a is not a route",
    ...     path="/cms/routes/a",
    ...     existing_type="Document",
    ... )
    >>> error.category
    <ErrorCategory.CONFLICT: 'CONFLICT'>
    >>> error.to_dict()["path"]
    '/cms/routes/a'

    Wrapping a driver error:

    >>> try:
    ...     raise OSError("disk full")
    ... except OSError as e:
    ...     error = StorageError("Failed to commit", cause=e)
    >>> error.cause
    OSError('disk full')

Guardrails:
    ❌ DON'T: Raise RuntimeError from the materializer
    ✅ DO: Raise the RouteSpineError subclass for the failure mode

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, route-tree, route-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Categories are grouped by what the caller has to fix:
    - **Configuration (never retryable):** CONFIG
    - **Tree structure:** CONFLICT, MIGRATION
    - **Infrastructure:** STORAGE
    - **Input:** VALIDATION
    - **Internal errors:** INTERNAL

    Attributes:
        CONFIG: Missing base path, bad route class, unknown adapter
        CONFLICT: Existing node at a path blocks materialization
        MIGRATION: In-place shape conversion produced the wrong shape
        STORAGE: Repository, driver and constraint failures
        VALIDATION: Malformed URIs and other bad input
        INTERNAL: Bugs, unexpected state
    """

    CONFIG = "CONFIG"
    CONFLICT = "CONFLICT"
    MIGRATION = "MIGRATION"
    STORAGE = "STORAGE"
    VALIDATION = "VALIDATION"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields cover what route errors usually need (the path involved,
    the URI being materialized, the locale); anything else goes into
    ``metadata``.

    Attributes:
        path: Repository path where the error occurred
        uri: Candidate URI being materialized
        locale: Locale tag of the request
        metadata: Additional key-value pairs
    """

    path: str | None = None
    uri: str | None = None
    locale: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "uri", "locale"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RouteSpineError(Exception):
    """
    Base exception for all route-spine errors.

    All RouteSpineError instances carry:
    - **category:** ErrorCategory enum for classification
    - **retryable:** Boolean indicating if the operation can be retried
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` and ``default_retryable`` to give
    sensible defaults for their failure mode.

    Examples:
        >>> error = RouteSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False

        Adding context fluently:

        >>> error = RouteSpineError("Lookup failed").with_context(
        ...     path="/cms/routes/a", tenant="blue"
        ... )
        >>> error.context.path
        '/cms/routes/a'
        >>> error.context.metadata["tenant"]
        'blue'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RouteSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("Failed").with_context(path="/cms/routes/a")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(RouteSpineError):
    """
    Configuration error.

    Raised when the configured base path does not resolve to a node.
    Never retryable - the base path must be provisioned first.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


class UnknownAdapterError(ConfigurationError):
    """Adapter name not found in the registry."""

    def __init__(self, name: str):
        self.adapter_name = name
        super().__init__(f"Unknown route adapter: {name}")


# =============================================================================
# TREE STRUCTURE ERRORS
# =============================================================================


class ConflictError(RouteSpineError):
    """
    An existing node blocks materialization at a path.

    The route tree below the base path may only hold placeholders and route
    nodes. Anything else at a route path is structural corruption. Also raised
    when moving children would collide with existing child names.
    """

    default_category = ErrorCategory.CONFLICT
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        existing_type: str | None = None,
        names: list[str] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = path
        self.existing_type = existing_type
        self.names = names or []
        if path is not None:
            self.context.path = path

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.path:
            result["path"] = self.path
        if self.existing_type:
            result["existing_type"] = self.existing_type
        if self.names:
            result["names"] = list(self.names)
        return result


class MigrationError(RouteSpineError):
    """
    In-place shape conversion reloaded an unexpected shape.

    Signals a repository inconsistency; surfaced, never retried.
    """

    default_category = ErrorCategory.MIGRATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        actual_type: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = path
        self.actual_type = actual_type
        if path is not None:
            self.context.path = path

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.path:
            result["path"] = self.path
        if self.actual_type:
            result["actual_type"] = self.actual_type
        return result


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(RouteSpineError):
    """Repository failure (driver, constraint, unknown shape)."""

    default_category = ErrorCategory.STORAGE
    default_retryable = False


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class InvalidUriError(RouteSpineError):
    """URI cannot be materialized (e.g. it has no segments)."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(self, uri: str, message: str | None = None):
        self.uri = uri
        super().__init__(message or f"URI {uri!r} has no path segments")
        self.context.uri = uri


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, RouteSpineError):
        return error.retryable
    return False


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, RouteSpineError):
        return error.category
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    if isinstance(error, OSError):
        return ErrorCategory.STORAGE
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "RouteSpineError",
    "ConfigurationError",
    "InvalidConfigError",
    "UnknownAdapterError",
    "ConflictError",
    "MigrationError",
    "StorageError",
    "InvalidUriError",
    "is_retryable",
    "categorize_error",
]
