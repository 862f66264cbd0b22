"""Type-aware equality and ordering for document values.

Document values are classified into a closed set of kinds so comparisons never
rely on Python's cross-type coercion (``True == 1``) or raise on mixed types.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from docstore.models.enums import ValueKind
from docstore.models.path import NOT_FOUND

# Rank of each kind when ordering values of different kinds.
_KIND_RANK: dict[ValueKind, int] = {
    ValueKind.NULL: 0,
    ValueKind.BOOL: 1,
    ValueKind.NUMBER: 1,
    ValueKind.STRING: 2,
    ValueKind.SEQUENCE: 3,
    ValueKind.MAPPING: 4,
    ValueKind.OTHER: 5,
}

_ORDERED_KINDS = frozenset({ValueKind.BOOL, ValueKind.NUMBER, ValueKind.STRING})


def kind_of(value: Any) -> ValueKind:
    if value is None or value is NOT_FOUND:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER


def is_mapping(value: Any) -> bool:
    return kind_of(value) is ValueKind.MAPPING


def is_sequence(value: Any) -> bool:
    return kind_of(value) is ValueKind.SEQUENCE


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality: values of different kinds are never equal."""
    if left is NOT_FOUND or right is NOT_FOUND:
        return left is right
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False
    if left_kind is ValueKind.MAPPING:
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if left_kind is ValueKind.SEQUENCE:
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    return bool(left == right)


def _sign(left: Any, right: Any) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def compare_strict(left: Any, right: Any) -> int | None:
    """Compare two values of the same ordered kind.

    Returns ``None`` when the values have no natural mutual ordering, which
    makes range filters evaluate to false instead of coercing.
    """
    left_kind = kind_of(left)
    if left_kind is not kind_of(right) or left_kind not in _ORDERED_KINDS:
        return None
    return _sign(left, right)


def compare_for_sort(left: Any, right: Any) -> int:
    """Total ordering used by sorting.

    Strings compare case-insensitively. Values of different kinds are ordered
    by kind, with missing and ``None`` values first.
    """
    left_kind, right_kind = kind_of(left), kind_of(right)
    left_rank, right_rank = _KIND_RANK[left_kind], _KIND_RANK[right_kind]
    if left_rank != right_rank:
        return -1 if left_rank < right_rank else 1
    if left_kind is ValueKind.NULL:
        return 0
    if left_kind is ValueKind.STRING:
        return _sign(left.lower(), right.lower())
    if left_kind is ValueKind.SEQUENCE:
        for a, b in zip(left, right):
            result = compare_for_sort(a, b)
            if result != 0:
                return result
        return _sign(len(left), len(right))
    if left_kind is ValueKind.MAPPING:
        return 0
    return _sign(left, right)
