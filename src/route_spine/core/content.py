"""In-memory content stores.

The CMS owns content items; route records only keep a content identifier.
These stores map content objects to identifiers and back, hold translations
and resolve type names (unwrapping lazy-loading proxy classes).

Tags:
    route-spine, content, translations, identity-map
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from route_spine.core.errors import StorageError
from route_spine.core.logging import get_logger

logger = get_logger(__name__)

# Dotted class names of generated proxies carry this namespace marker
PROXY_MARKER = "__proxy__."


def real_class_name(class_name: str | type) -> str:
    """Dotted name of the real class behind *class_name*.

    Classes flagged with ``__proxy__ = True`` (lazy-loading subclasses) are
    skipped in favour of the first real base class. String names drop
    everything up to and including :data:`PROXY_MARKER`.
    """
    if isinstance(class_name, type):
        for klass in class_name.__mro__:
            if not klass.__dict__.get("__proxy__", False):
                return f"{klass.__module__}.{klass.__qualname__}"
        return f"{class_name.__module__}.{class_name.__qualname__}"

    position = class_name.rfind(PROXY_MARKER)
    if position == -1:
        return class_name
    return class_name[position + len(PROXY_MARKER):]


class InMemoryContentStore:
    """Content identity map with translation storage.

    Content is registered explicitly with :meth:`add`, or implicitly the
    first time :meth:`identify` sees it (using its ``id`` attribute when
    it has one).
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Any] = {}
        self._ids: dict[int, str] = {}
        self._locales: dict[str, list[str]] = {}
        self._translations: dict[tuple[str, str], Any] = {}

    def add(
        self,
        content: Any,
        *,
        content_id: str | None = None,
        locales: list[str] | None = None,
    ) -> str:
        """Register *content*; *locales* marks it translatable.

        Raises:
            StorageError: *content_id* already belongs to a different object.
        """
        key = id(content)
        if key in self._ids:
            registered = self._ids[key]
        else:
            registered = content_id or str(getattr(content, "id", "") or uuid.uuid4().hex)
            if registered in self._by_id and self._by_id[registered] is not content:
                raise StorageError(
                    f"Content id {registered!r} is already registered to another object"
                ).with_context(content_id=registered)
            self._by_id[registered] = content
            self._ids[key] = registered
        if locales is not None:
            self._locales[registered] = list(locales)
        return registered

    def add_translation(self, content: Any, locale: str, translated: Any) -> None:
        content_id = self.identify(content)
        locales = self._locales.setdefault(content_id, [])
        if locale not in locales:
            locales.append(locale)
        self._translations[(content_id, locale)] = translated

    def identify(self, content: Any) -> str:
        return self._ids.get(id(content)) or self.add(content)

    def resolve(self, content_id: str) -> Any:
        return self._by_id.get(content_id)

    def is_translatable(self, content: Any) -> bool:
        return self.identify(content) in self._locales

    def locales_for(self, content: Any) -> list[str]:
        return list(self._locales.get(self.identify(content), []))

    def find_translation(self, type_name: str, content_id: str, locale: str) -> Any:
        translated = self._translations.get((content_id, locale))
        if translated is None:
            logger.debug(
                "translation_missing", type_name=type_name, content_id=content_id, locale=locale
            )
        return translated

    def type_name(self, content: Any) -> str:
        return real_class_name(type(content))

    def real_class_name(self, class_name: str | type) -> str:
        return real_class_name(class_name)


@dataclass(frozen=True)
class ContentReference:
    """Stand-in for a content item known only by its identifier."""

    id: str


class ReferenceContentStore(InMemoryContentStore):
    """Content store that interns a :class:`ContentReference` per unknown id.

    Used where the CMS is not loaded (the CLI): routes still resolve to one
    object per content id, so identity comparisons keep working.
    """

    def resolve(self, content_id: str) -> Any:
        content = super().resolve(content_id)
        if content is None:
            content = ContentReference(content_id)
            self.add(content, content_id=content_id)
        return content


__all__ = [
    "PROXY_MARKER",
    "real_class_name",
    "InMemoryContentStore",
    "ContentReference",
    "ReferenceContentStore",
]
