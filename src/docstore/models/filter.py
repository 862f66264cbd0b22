"""Predicate algebra evaluated against stored documents.

Filters are immutable trees built by the caller. Every node answers
``match(document, doc_id)``; nested properties are addressed with dot paths.
Nodes carry a ``kind`` discriminator so a tree round-trips through plain
records (``to_record`` / ``filter_from_record``).
"""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import Field, TypeAdapter, ValidationInfo, field_validator

from docstore.models.base import FrozenModel, ensure_dot_path, ensure_non_empty_text
from docstore.models.path import NOT_FOUND, exists, resolve
from docstore.models.values import compare_strict, is_mapping, is_sequence, values_equal


class FilterNode(FrozenModel):
    @abstractmethod
    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        """Return True if the document identified by ``doc_id`` is selected."""


class _PropFilter(FilterNode):
    prop: str

    @field_validator("prop")
    @classmethod
    def _validate_prop(cls, value: str, info: ValidationInfo) -> str:
        return ensure_dot_path(value, info.field_name or "prop")


class EqFilter(_PropFilter):
    kind: Literal["eq"] = "eq"
    value: Any

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return values_equal(resolve(document, self.prop), self.value)


class _RangeFilter(_PropFilter):
    value: Any

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        resolved = resolve(document, self.prop)
        if resolved is NOT_FOUND:
            return False
        result = compare_strict(resolved, self.value)
        if result is None:
            return False
        return self._accepts(result)

    @abstractmethod
    def _accepts(self, result: int) -> bool: ...


class GtFilter(_RangeFilter):
    kind: Literal["gt"] = "gt"

    def _accepts(self, result: int) -> bool:
        return result > 0


class GteFilter(_RangeFilter):
    kind: Literal["gte"] = "gte"

    def _accepts(self, result: int) -> bool:
        return result >= 0


class LtFilter(_RangeFilter):
    kind: Literal["lt"] = "lt"

    def _accepts(self, result: int) -> bool:
        return result < 0


class LteFilter(_RangeFilter):
    kind: Literal["lte"] = "lte"

    def _accepts(self, result: int) -> bool:
        return result <= 0


class LikeFilter(_PropFilter):
    """Case-insensitive string match with ``%`` wildcards at either end.

    ``"foo%"`` matches values starting with foo, ``"%foo"`` values ending with
    foo, ``"%foo%"`` values containing foo. Without wildcards the whole value
    must match.
    """

    WILDCARD: ClassVar[str] = "%"

    kind: Literal["like"] = "like"
    pattern: str

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        ensure_non_empty_text(value, "pattern")
        if not value.strip(cls.WILDCARD):
            raise ValueError("pattern must contain more than wildcards")
        return value

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        resolved = resolve(document, self.prop)
        if not isinstance(resolved, str):
            return False

        starts_open = self.pattern.startswith(self.WILDCARD)
        ends_open = self.pattern.endswith(self.WILDCARD)
        needle = self.pattern.strip(self.WILDCARD).lower()
        haystack = resolved.lower()

        if starts_open and ends_open:
            return needle in haystack
        if starts_open:
            return haystack.endswith(needle)
        if ends_open:
            return haystack.startswith(needle)
        return haystack == needle


class InArrayFilter(_PropFilter):
    """Matches when the sequence at ``prop`` contains ``value``.

    A mapping element also matches a mapping ``value`` when the two share at
    least one equal key/value pair.
    """

    kind: Literal["in_array"] = "in_array"
    value: Any

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        resolved = resolve(document, self.prop)
        if not is_sequence(resolved):
            return False

        for item in resolved:
            if values_equal(item, self.value):
                return True
            if is_mapping(item) and is_mapping(self.value) and _intersects(item, self.value):
                return True
        return False


def _intersects(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    return any(key in left and values_equal(left[key], value) for key, value in right.items())


class AnyOfFilter(_PropFilter):
    kind: Literal["any_of"] = "any_of"
    values: tuple[Any, ...]

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        resolved = resolve(document, self.prop)
        if resolved is NOT_FOUND:
            return False
        return any(values_equal(resolved, candidate) for candidate in self.values)


class ExistsFilter(_PropFilter):
    """Matches when ``prop`` is present, even if it holds ``None``."""

    kind: Literal["exists"] = "exists"

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return exists(document, self.prop)


class NotFilter(FilterNode):
    kind: Literal["not"] = "not"
    inner: "Filter"

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return not self.inner.match(document, doc_id)


class AndFilter(FilterNode):
    kind: Literal["and"] = "and"
    filters: tuple["Filter", ...] = Field(min_length=1)

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return all(item.match(document, doc_id) for item in self.filters)


class OrFilter(FilterNode):
    kind: Literal["or"] = "or"
    filters: tuple["Filter", ...] = Field(min_length=1)

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return any(item.match(document, doc_id) for item in self.filters)


class AnyFilter(FilterNode):
    """Matches every document."""

    kind: Literal["any"] = "any"

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return True


class DocIdFilter(FilterNode):
    kind: Literal["doc_id"] = "doc_id"
    doc_id: str

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return doc_id == self.doc_id


class AnyOfDocIdFilter(FilterNode):
    kind: Literal["any_of_doc_id"] = "any_of_doc_id"
    doc_ids: frozenset[str]

    def match(self, document: Mapping[str, Any], doc_id: str) -> bool:
        return doc_id in self.doc_ids


Filter = Annotated[
    Union[
        EqFilter,
        GtFilter,
        GteFilter,
        LtFilter,
        LteFilter,
        LikeFilter,
        InArrayFilter,
        AnyOfFilter,
        ExistsFilter,
        NotFilter,
        AndFilter,
        OrFilter,
        AnyFilter,
        DocIdFilter,
        AnyOfDocIdFilter,
    ],
    Field(discriminator="kind"),
]

NotFilter.model_rebuild()
AndFilter.model_rebuild()
OrFilter.model_rebuild()

_filter_adapter: TypeAdapter[Filter] = TypeAdapter(Filter)


def filter_from_record(data: Mapping[str, Any] | str) -> FilterNode:
    """Build a filter tree from a record or its JSON text."""
    if isinstance(data, str):
        return _filter_adapter.validate_json(data)
    return _filter_adapter.validate_python(data)


__all__ = [
    "Filter",
    "FilterNode",
    "EqFilter",
    "GtFilter",
    "GteFilter",
    "LtFilter",
    "LteFilter",
    "LikeFilter",
    "InArrayFilter",
    "AnyOfFilter",
    "ExistsFilter",
    "NotFilter",
    "AndFilter",
    "OrFilter",
    "AnyFilter",
    "DocIdFilter",
    "AnyOfDocIdFilter",
    "filter_from_record",
]
