"""Order-by algebra used to sort query results.

Orderings compare ``(doc_id, document)`` entries. ``AndOrder`` chains a
secondary ordering that is consulted only when the primary one ties.
"""

from abc import abstractmethod
from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationInfo, field_validator

from docstore.models.base import FrozenModel, ensure_dot_path
from docstore.models.enums import SortDirection
from docstore.models.path import resolve
from docstore.models.values import compare_for_sort

DocEntry = tuple[str, Mapping[str, Any]]
Comparator = Callable[[DocEntry, DocEntry], int]


class OrderNode(FrozenModel):
    @property
    def descending(self) -> bool:
        return False

    @abstractmethod
    def compare(self, left: DocEntry, right: DocEntry) -> int:
        """Return -1, 0 or 1 for the relative order of two entries."""


class _PropOrder(OrderNode):
    prop: str

    @field_validator("prop")
    @classmethod
    def _validate_prop(cls, value: str, info: ValidationInfo) -> str:
        return ensure_dot_path(value, info.field_name or "prop")

    def _compare_ascending(self, left: DocEntry, right: DocEntry) -> int:
        return compare_for_sort(resolve(left[1], self.prop), resolve(right[1], self.prop))


class AscOrder(_PropOrder):
    kind: Literal["asc"] = "asc"

    def compare(self, left: DocEntry, right: DocEntry) -> int:
        return self._compare_ascending(left, right)


class DescOrder(_PropOrder):
    kind: Literal["desc"] = "desc"

    @property
    def descending(self) -> bool:
        return True

    def compare(self, left: DocEntry, right: DocEntry) -> int:
        return -self._compare_ascending(left, right)


class DocIdOrder(OrderNode):
    kind: Literal["doc_id"] = "doc_id"
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    def compare(self, left: DocEntry, right: DocEntry) -> int:
        result = (left[0] > right[0]) - (left[0] < right[0])
        return -result if self.descending else result


class AndOrder(OrderNode):
    """Primary ordering with a tie-breaking secondary ordering.

    The direction of a descending primary applies to the whole chain, so a
    tie resolved by ``second`` is inverted as well.
    """

    kind: Literal["and"] = "and"
    first: "OrderBy"
    second: "OrderBy"

    def compare(self, left: DocEntry, right: DocEntry) -> int:
        result = self.first.compare(left, right)
        if result != 0:
            return result
        result = self.second.compare(left, right)
        return -result if self.first.descending else result


OrderBy = Annotated[
    Union[AscOrder, DescOrder, DocIdOrder, AndOrder],
    Field(discriminator="kind"),
]

AndOrder.model_rebuild()

_order_by_adapter: TypeAdapter[OrderBy] = TypeAdapter(OrderBy)


def order_by_from_record(data: Mapping[str, Any] | str) -> OrderNode:
    """Build an ordering from a record or its JSON text."""
    if isinstance(data, str):
        return _order_by_adapter.validate_json(data)
    return _order_by_adapter.validate_python(data)


def build_comparator(order_by: OrderNode) -> Comparator:
    return order_by.compare


__all__ = [
    "OrderBy",
    "OrderNode",
    "AscOrder",
    "DescOrder",
    "DocIdOrder",
    "AndOrder",
    "DocEntry",
    "Comparator",
    "build_comparator",
    "order_by_from_record",
]
