"""Errors raised by the document store."""


class DocumentStoreError(Exception):
    """Base class for document store errors."""


class UnknownCollection(DocumentStoreError):
    """Raised when an operation references a collection that does not exist."""

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        super().__init__(f"Collection {collection_name!r} does not exist")


class CollectionAlreadyExists(DocumentStoreError):
    """Raised when adding a collection under a name that is already taken."""

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        super().__init__(f"Collection {collection_name!r} exists already")


class DuplicateDocument(DocumentStoreError):
    """Raised when adding a document with an id that is already taken."""

    def __init__(self, collection_name: str, doc_id: str) -> None:
        self.collection_name = collection_name
        self.doc_id = doc_id
        super().__init__(
            f"Cannot add doc with id {doc_id!r}. The doc already exists in collection {collection_name!r}"
        )


class DocumentNotFound(DocumentStoreError):
    """Raised when updating or replacing a document that does not exist."""

    def __init__(self, collection_name: str, doc_id: str) -> None:
        self.collection_name = collection_name
        self.doc_id = doc_id
        super().__init__(f"Doc with id {doc_id!r} does not exist in collection {collection_name!r}")


class UniqueConstraintViolation(DocumentStoreError):
    """Raised when a write would store two documents equal on a unique index."""

    def __init__(
        self,
        message: str,
        fields: tuple[str, ...],
        doc_id: str,
        conflicting_doc_id: str,
    ) -> None:
        self.fields = fields
        self.doc_id = doc_id
        self.conflicting_doc_id = conflicting_doc_id
        super().__init__(message)


class InvalidIndexDefinition(DocumentStoreError):
    """Raised when an index is declared with an unusable field set."""


class InvalidProjection(DocumentStoreError):
    """Raised when a partial select cannot be applied to a document."""
