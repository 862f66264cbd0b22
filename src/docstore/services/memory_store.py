"""In-memory document store.

Keeps named collections of schemaless documents keyed by document id, together
with their index declarations. Unique indices are enforced on every write by
scanning the collection; no physical index structure is maintained.
"""

import copy
import threading
import warnings
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any

import structlog

from docstore.errors import (
    CollectionAlreadyExists,
    DocumentNotFound,
    DuplicateDocument,
    UniqueConstraintViolation,
    UnknownCollection,
)
from docstore.models.filter import AndFilter, EqFilter, ExistsFilter, FilterNode, NotFilter
from docstore.models.index import FieldIndex, MultiFieldIndex
from docstore.models.order_by import DocEntry, OrderNode, build_comparator
from docstore.models.partial_select import PartialSelect
from docstore.models.path import exists, resolve
from docstore.models.values import is_mapping
from docstore.services.projection import project

IndexDefinition = FieldIndex | MultiFieldIndex


@dataclass
class _Collection:
    documents: dict[str, dict[str, Any]] = field(default_factory=dict)
    indices: list[IndexDefinition] = field(default_factory=list)


def merge_documents(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``patch`` into a copy of ``existing``.

    Only mappings are merged key by key. Sequences and scalars in the patch
    replace the existing value as a whole.
    """
    merged = dict(existing)
    for key, value in patch.items():
        current = merged.get(key)
        if is_mapping(current) and is_mapping(value):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = value
    return merged


class InMemoryDocumentStore:
    """Document store keeping all collections in process memory.

    All operations are synchronous. A re-entrant lock serialises access so an
    index-checked write cannot interleave with another write.
    Documents are copied on the way in and on the way out; callers never hold
    references into the store's state.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._collections: dict[str, _Collection] = {}
        self._lock = threading.RLock()
        self._logger = logger or structlog.get_logger(__name__)

    # Collections

    def list_collections(self) -> list[str]:
        with self._lock:
            return list(self._collections)

    def filter_collections_by_prefix(self, prefix: str) -> list[str]:
        with self._lock:
            return [name for name in self._collections if name.startswith(prefix)]

    def has_collection(self, collection_name: str) -> bool:
        with self._lock:
            return collection_name in self._collections

    def add_collection(self, collection_name: str, *indices: IndexDefinition) -> None:
        """Create an empty collection with the given index declarations.

        Raises:
            CollectionAlreadyExists: If the name is taken.
        """
        with self._lock:
            if collection_name in self._collections:
                raise CollectionAlreadyExists(collection_name)
            self._collections[collection_name] = _Collection(indices=list(indices))
        self._logger.info(
            "collection_added",
            collection=collection_name,
            index_count=len(indices),
        )

    def drop_collection(self, collection_name: str) -> None:
        """Remove a collection and its indices. Dropping a missing collection is a no-op."""
        with self._lock:
            dropped = self._collections.pop(collection_name, None)
        if dropped is not None:
            self._logger.info("collection_dropped", collection=collection_name)

    # Indices

    def has_collection_index(self, collection_name: str, index_name: str) -> bool:
        with self._lock:
            collection = self._get_collection(collection_name)
            return any(index.name == index_name for index in collection.indices)

    def list_collection_indices(self, collection_name: str) -> list[IndexDefinition]:
        with self._lock:
            return list(self._get_collection(collection_name).indices)

    def add_collection_index(self, collection_name: str, index: IndexDefinition) -> None:
        """Declare an index on an existing collection.

        A named index replaces any index carrying the same name. A unique index
        is validated against all stored documents first; on conflict nothing
        changes.

        Raises:
            UnknownCollection: If the collection does not exist.
            UniqueConstraintViolation: If stored documents conflict with the index.
        """
        with self._lock:
            collection = self._get_collection(collection_name)

            if index.unique and len(collection.documents) > 1:
                for doc_id, document in collection.documents.items():
                    self._assert_unique(
                        collection_name,
                        collection,
                        doc_id,
                        document,
                        index,
                        message="Unique constraint violation. Cannot add unique index because "
                        "existing documents conflict with it!",
                    )

            if index.name is not None:
                self._remove_indices(collection, lambda existing: existing.name == index.name)
            collection.indices.append(index)

        self._logger.info(
            "collection_index_added",
            collection=collection_name,
            index_name=index.name,
            fields=list(index.field_names),
            unique=index.unique,
        )

    def drop_collection_index(self, collection_name: str, index: IndexDefinition | str) -> None:
        """Remove an index by identity, or every index carrying the given name."""
        with self._lock:
            collection = self._get_collection(collection_name)
            if isinstance(index, str):
                removed = self._remove_indices(collection, lambda existing: existing.name == index)
            else:
                removed = self._remove_indices(collection, lambda existing: existing is index)
        if removed:
            self._logger.info(
                "collection_index_dropped",
                collection=collection_name,
                removed_count=removed,
            )

    # Documents

    def add_doc(self, collection_name: str, doc_id: str, doc: Mapping[str, Any]) -> None:
        """Insert a new document.

        Raises:
            UnknownCollection: If the collection does not exist.
            DuplicateDocument: If ``doc_id`` is already stored.
            UniqueConstraintViolation: If the document conflicts with a unique index.
        """
        with self._lock:
            collection = self._get_collection(collection_name)
            if doc_id in collection.documents:
                raise DuplicateDocument(collection_name, doc_id)

            self._assert_unique_constraints(collection_name, collection, doc_id, doc)
            collection.documents[doc_id] = copy.deepcopy(dict(doc))
        self._logger.debug("doc_added", collection=collection_name, doc_id=doc_id)

    def update_doc(self, collection_name: str, doc_id: str, doc_or_subset: Mapping[str, Any]) -> None:
        """Merge ``doc_or_subset`` into an existing document.

        Nested mappings are merged recursively; any other value, including
        sequences, replaces the stored value.

        Raises:
            UnknownCollection: If the collection does not exist.
            DocumentNotFound: If no document is stored under ``doc_id``.
            UniqueConstraintViolation: If the merged document conflicts with a unique index.
        """
        with self._lock:
            collection = self._get_collection(collection_name)
            existing = collection.documents.get(doc_id)
            if existing is None:
                raise DocumentNotFound(collection_name, doc_id)

            merged = merge_documents(existing, copy.deepcopy(dict(doc_or_subset)))
            self._assert_unique_constraints(collection_name, collection, doc_id, merged)
            collection.documents[doc_id] = merged
        self._logger.debug("doc_updated", collection=collection_name, doc_id=doc_id)

    def upsert_doc(self, collection_name: str, doc_id: str, doc_or_subset: Mapping[str, Any]) -> None:
        """Update the document if it exists, add it otherwise."""
        with self._lock:
            if doc_id in self._get_collection(collection_name).documents:
                self.update_doc(collection_name, doc_id, doc_or_subset)
            else:
                self.add_doc(collection_name, doc_id, doc_or_subset)

    def replace_doc(self, collection_name: str, doc_id: str, doc: Mapping[str, Any]) -> None:
        """Replace an existing document as a whole.

        Raises:
            UnknownCollection: If the collection does not exist.
            DocumentNotFound: If no document is stored under ``doc_id``.
            UniqueConstraintViolation: If the new document conflicts with a unique index.
        """
        with self._lock:
            collection = self._get_collection(collection_name)
            if doc_id not in collection.documents:
                raise DocumentNotFound(collection_name, doc_id)

            self._assert_unique_constraints(collection_name, collection, doc_id, doc)
            collection.documents[doc_id] = copy.deepcopy(dict(doc))
        self._logger.debug("doc_replaced", collection=collection_name, doc_id=doc_id)

    def delete_doc(self, collection_name: str, doc_id: str) -> None:
        """Remove a document. Deleting a missing document is a no-op."""
        with self._lock:
            removed = self._get_collection(collection_name).documents.pop(doc_id, None)
        if removed is not None:
            self._logger.debug("doc_deleted", collection=collection_name, doc_id=doc_id)

    def update_many(self, collection_name: str, filter: FilterNode, patch: Mapping[str, Any]) -> None:
        """Merge ``patch`` into every matching document.

        Each document is updated on its own. If one update fails, documents
        updated before it keep their changes and the error propagates.
        """
        with self._lock:
            for doc_id in self._matching_ids(collection_name, filter):
                self.update_doc(collection_name, doc_id, patch)

    def replace_many(self, collection_name: str, filter: FilterNode, doc: Mapping[str, Any]) -> None:
        """Replace every matching document. Not atomic, see ``update_many``."""
        with self._lock:
            for doc_id in self._matching_ids(collection_name, filter):
                self.replace_doc(collection_name, doc_id, doc)

    def delete_many(self, collection_name: str, filter: FilterNode) -> None:
        with self._lock:
            for doc_id in self._matching_ids(collection_name, filter):
                self.delete_doc(collection_name, doc_id)

    def get_doc(self, collection_name: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._get_collection(collection_name).documents.get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def get_partial_doc(
        self,
        collection_name: str,
        partial_select: PartialSelect,
        doc_id: str,
    ) -> dict[str, Any] | None:
        with self._lock:
            document = self._get_collection(collection_name).documents.get(doc_id)
            if document is None:
                return None
            return project(document, partial_select)

    # Queries

    def filter_docs(
        self,
        collection_name: str,
        filter: FilterNode,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderNode | None = None,
    ) -> list[dict[str, Any]]:
        """Deprecated: return matching documents without their ids. Use ``find_docs``."""
        warnings.warn(
            "filter_docs is deprecated, use find_docs instead",
            DeprecationWarning,
            stacklevel=2,
        )
        with self._lock:
            return [
                copy.deepcopy(document)
                for _, document in self._query(collection_name, filter, skip, limit, order_by)
            ]

    def find_docs(
        self,
        collection_name: str,
        filter: FilterNode,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderNode | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Return matching documents keyed by doc id, in result order."""
        with self._lock:
            return {
                doc_id: copy.deepcopy(document)
                for doc_id, document in self._query(collection_name, filter, skip, limit, order_by)
            }

    def find_partial_docs(
        self,
        collection_name: str,
        partial_select: PartialSelect,
        filter: FilterNode,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderNode | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Return projected matching documents keyed by doc id, in result order."""
        with self._lock:
            return {
                doc_id: project(document, partial_select)
                for doc_id, document in self._query(collection_name, filter, skip, limit, order_by)
            }

    def filter_doc_ids(self, collection_name: str, filter: FilterNode) -> list[str]:
        with self._lock:
            return self._matching_ids(collection_name, filter)

    def count_docs(self, collection_name: str, filter: FilterNode) -> int:
        with self._lock:
            collection = self._get_collection(collection_name)
            return sum(1 for doc_id, document in collection.documents.items() if filter.match(document, doc_id))

    # Internals

    def _get_collection(self, collection_name: str) -> _Collection:
        collection = self._collections.get(collection_name)
        if collection is None:
            raise UnknownCollection(collection_name)
        return collection

    def _matching_ids(self, collection_name: str, filter: FilterNode) -> list[str]:
        collection = self._get_collection(collection_name)
        return [doc_id for doc_id, document in collection.documents.items() if filter.match(document, doc_id)]

    def _query(
        self,
        collection_name: str,
        filter: FilterNode,
        skip: int | None,
        limit: int | None,
        order_by: OrderNode | None,
    ) -> Iterator[DocEntry]:
        """Select, sort and slice entries from a snapshot of the collection."""
        collection = self._get_collection(collection_name)
        entries: list[DocEntry] = [
            (doc_id, document) for doc_id, document in collection.documents.items() if filter.match(document, doc_id)
        ]

        if order_by is not None:
            entries = sorted(entries, key=cmp_to_key(build_comparator(order_by)))

        start = skip or 0
        stop = start + limit if limit is not None else None
        return iter(entries[start:stop])

    def _remove_indices(self, collection: _Collection, predicate: Callable[[IndexDefinition], bool]) -> int:
        kept = [existing for existing in collection.indices if not predicate(existing)]
        removed = len(collection.indices) - len(kept)
        collection.indices[:] = kept
        return removed

    def _assert_unique_constraints(
        self,
        collection_name: str,
        collection: _Collection,
        doc_id: str,
        document: Mapping[str, Any],
    ) -> None:
        for index in collection.indices:
            if index.unique:
                self._assert_unique(collection_name, collection, doc_id, document, index)

    def _assert_unique(
        self,
        collection_name: str,
        collection: _Collection,
        doc_id: str,
        document: Mapping[str, Any],
        index: IndexDefinition,
        message: str | None = None,
    ) -> None:
        check = _unique_check_filter(document, index.field_names)
        if check is None:
            return

        for existing_id, existing in collection.documents.items():
            if existing_id == doc_id or not check.match(existing, existing_id):
                continue

            fields = ", ".join(index.field_names)
            self._logger.warning(
                "unique_constraint_violated",
                collection=collection_name,
                doc_id=doc_id,
                conflicting_doc_id=existing_id,
                fields=list(index.field_names),
            )
            raise UniqueConstraintViolation(
                message
                or f"Unique constraint violation. Cannot insert or update document with id {doc_id}, "
                f"because a document with same values for fields: {fields} exists already!",
                fields=index.field_names,
                doc_id=doc_id,
                conflicting_doc_id=existing_id,
            )


def _unique_check_filter(document: Mapping[str, Any], field_names: tuple[str, ...]) -> FilterNode | None:
    """Build the filter matching documents that duplicate ``document`` on ``field_names``.

    Fields present in ``document`` must be equal, fields it lacks must be absent.
    Returns None when none of the fields is present, since there is nothing to
    compare.
    """
    present: list[FilterNode] = []
    absent: list[FilterNode] = []
    for field_name in field_names:
        if exists(document, field_name):
            present.append(EqFilter(prop=field_name, value=resolve(document, field_name)))
        else:
            absent.append(NotFilter(inner=ExistsFilter(prop=field_name)))

    if not present:
        return None
    checks = present + absent
    if len(checks) == 1:
        return checks[0]
    return AndFilter(filters=tuple(checks))
