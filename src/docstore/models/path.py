"""Dot-path access into nested documents.

A path such as ``"some.other.prop"`` addresses mapping keys only, one level per
segment. Resolution stops at the first missing key or non-mapping value and
returns :data:`NOT_FOUND`, which is distinct from a stored ``None``.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Final


class _NotFound:
    _instance: "_NotFound | None" = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __reduce__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = _NotFound()


def split_path(path: str) -> list[str]:
    return path.split(".")


def resolve(document: Mapping[str, Any], path: str) -> Any:
    """Return the value stored at ``path`` or ``NOT_FOUND``."""
    current: Any = document
    for segment in split_path(path):
        if not isinstance(current, Mapping) or segment not in current:
            return NOT_FOUND
        current = current[segment]
    return current


def exists(document: Mapping[str, Any], path: str) -> bool:
    return resolve(document, path) is not NOT_FOUND


def assign(target: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Set ``value`` at ``path``, creating intermediate mappings as needed.

    Sibling keys already present along the path are left untouched. An
    intermediate value that is not a mapping is replaced by a new one.
    """
    *parents, leaf = split_path(path)
    current = target
    for segment in parents:
        child = current.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            current[segment] = child
        current = child
    current[leaf] = value
