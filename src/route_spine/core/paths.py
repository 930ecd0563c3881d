"""Path helpers for the route tree.

Repository paths are absolute, ``/``-separated and never end with a slash
(except the root ``/``). URIs are split on ``/`` with empty segments dropped.
"""

from __future__ import annotations

SEPARATOR = "/"
ROOT_PATH = "/"


def split_segments(uri: str) -> list[str]:
    """Split *uri* into its non-empty path segments."""
    return [segment for segment in uri.split(SEPARATOR) if segment]


def join_path(base: str, *segments: str) -> str:
    """Append *segments* (each may itself contain separators) to *base*."""
    parts = split_segments(base)
    for segment in segments:
        parts.extend(split_segments(segment))
    return ROOT_PATH + SEPARATOR.join(parts)


def parent_of(path: str) -> str | None:
    """Return the parent path, or None for the root."""
    parts = split_segments(path)
    if not parts:
        return None
    return ROOT_PATH + SEPARATOR.join(parts[:-1])


def basename(path: str) -> str:
    parts = split_segments(path)
    return parts[-1] if parts else ""


def is_descendant(path: str, ancestor: str) -> bool:
    """True when *path* lies strictly below *ancestor*."""
    if ancestor == ROOT_PATH:
        return path != ROOT_PATH
    return path.startswith(ancestor + SEPARATOR)


def rebase(path: str, source: str, dest: str) -> str:
    """Rewrite *path* (equal to or below *source*) to live under *dest*."""
    if path == source:
        return dest
    return join_path(dest, path[len(source):])


__all__ = [
    "SEPARATOR",
    "ROOT_PATH",
    "split_segments",
    "join_path",
    "parent_of",
    "basename",
    "is_descendant",
    "rebase",
]
