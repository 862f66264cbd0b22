"""Factory functions for creating document stores.

Provides a plain in-memory store and a store seeded from a snapshot, the form
the CLI loads from disk.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from docstore.models.snapshot import StoreSnapshot
from docstore.services.memory_store import InMemoryDocumentStore


def create_document_store(
    logger: structlog.stdlib.BoundLogger | None = None,
) -> InMemoryDocumentStore:
    """Create an empty InMemoryDocumentStore.

    Args:
        logger: Structured logger shared with the store. Defaults to a module logger.

    Returns:
        A store without collections.
    """
    return InMemoryDocumentStore(logger=logger or structlog.get_logger(__name__))


def create_seeded_document_store(
    snapshot: StoreSnapshot | Mapping[str, Any],
    logger: structlog.stdlib.BoundLogger | None = None,
) -> InMemoryDocumentStore:
    """Create a store holding the collections described by ``snapshot``.

    Documents go through the regular write path, so unique indices declared
    in the snapshot are enforced while seeding.

    Args:
        snapshot: A StoreSnapshot or its record form.
        logger: Structured logger shared with the store.

    Returns:
        Configured InMemoryDocumentStore.

    Raises:
        pydantic.ValidationError: If the snapshot is malformed.
        UniqueConstraintViolation: If seeded documents violate a unique index.
    """
    if not isinstance(snapshot, StoreSnapshot):
        snapshot = StoreSnapshot.from_record(snapshot)

    logger = logger or structlog.get_logger(__name__)
    store = create_document_store(logger=logger)
    for collection_name, collection in snapshot.collections().items():
        store.add_collection(collection_name, *collection.indices)
        for doc_id, document in collection.documents.items():
            store.add_doc(collection_name, doc_id, document)

    logger.info(
        "document_store_seeded",
        collection_count=len(snapshot.collections()),
    )
    return store


def load_snapshot(path: Path) -> StoreSnapshot:
    """Read a JSON snapshot file.

    Args:
        path: Path to the snapshot file.

    Returns:
        The validated StoreSnapshot.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file content is not a valid snapshot.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Snapshot not found: {path}")
    return StoreSnapshot.from_record(path.read_text(encoding="utf-8"))


def parse_select_option(option: str) -> tuple[str, str]:
    """Parse a ``field[:alias]`` select option into an ``(alias, field)`` pair.

    A field without alias keeps its own name.
    """
    field, _, alias = option.partition(":")
    return (alias or field, field)
