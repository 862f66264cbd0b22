from docstore.models.enums import SortDirection, ValueKind
from docstore.models.filter import (
    AndFilter,
    AnyFilter,
    AnyOfDocIdFilter,
    AnyOfFilter,
    DocIdFilter,
    EqFilter,
    ExistsFilter,
    Filter,
    FilterNode,
    GteFilter,
    GtFilter,
    InArrayFilter,
    LikeFilter,
    LteFilter,
    LtFilter,
    NotFilter,
    OrFilter,
)
from docstore.models.index import FieldIndex, Index, MultiFieldIndex
from docstore.models.order_by import AndOrder, AscOrder, DescOrder, DocIdOrder, OrderBy, OrderNode
from docstore.models.partial_select import MERGE_ALIAS, FieldAlias, PartialSelect
from docstore.models.path import NOT_FOUND
from docstore.models.snapshot import CollectionSnapshot, StoreSnapshot

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
    "OrderBy",
    "OrderNode",
    "AscOrder",
    "DescOrder",
    "DocIdOrder",
    "AndOrder",
    "Index",
    "FieldIndex",
    "MultiFieldIndex",
    "PartialSelect",
    "FieldAlias",
    "MERGE_ALIAS",
    "NOT_FOUND",
    "CollectionSnapshot",
    "StoreSnapshot",
    "SortDirection",
    "ValueKind",
]
