"""Serialized form of a store's collections, used to seed a store."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from docstore.models.base import ensure_non_empty_text
from docstore.models.index import Index


class CollectionSnapshot(BaseModel):
    indices: list[Index] = Field(default_factory=list)
    documents: dict[str, dict[str, Any]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class StoreSnapshot(RootModel[dict[str, CollectionSnapshot]]):
    """Mapping from collection name to its indices and documents."""

    @field_validator("root")
    @classmethod
    def _validate_names(cls, value: dict[str, CollectionSnapshot]) -> dict[str, CollectionSnapshot]:
        for name in value:
            ensure_non_empty_text(name, "collection name")
        return value

    @classmethod
    def from_record(cls, data: Mapping[str, Any] | str) -> "StoreSnapshot":
        if isinstance(data, str):
            return cls.model_validate_json(data)
        return cls.model_validate(data)

    def collections(self) -> dict[str, CollectionSnapshot]:
        return self.root


__all__ = ["CollectionSnapshot", "StoreSnapshot"]
