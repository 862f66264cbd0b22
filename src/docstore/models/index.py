"""Index declarations for collections.

Indices are metadata: the in-memory store keeps no sorted structure for them,
but unique indices are enforced on every write.
"""

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationInfo, field_validator, model_validator

from docstore.errors import InvalidIndexDefinition
from docstore.models.base import FrozenModel, ensure_dot_path, ensure_non_empty_text
from docstore.models.enums import SortDirection


class _IndexBase(FrozenModel):
    unique: bool = False
    name: str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None:
            return None
        return ensure_non_empty_text(value, info.field_name or "name")


class FieldIndex(_IndexBase):
    kind: Literal["field"] = "field"
    field: str
    sort: SortDirection = SortDirection.ASC

    @field_validator("field")
    @classmethod
    def _validate_field(cls, value: str) -> str:
        return ensure_dot_path(value, "field")

    @property
    def field_names(self) -> tuple[str, ...]:
        return (self.field,)

    @classmethod
    def for_field(
        cls,
        field: str,
        sort: SortDirection = SortDirection.ASC,
        unique: bool = False,
    ) -> "FieldIndex":
        return cls(field=field, sort=sort, unique=unique)

    @classmethod
    def named_for_field(
        cls,
        name: str,
        field: str,
        sort: SortDirection = SortDirection.ASC,
        unique: bool = False,
    ) -> "FieldIndex":
        return cls(name=name, field=field, sort=sort, unique=unique)


class MultiFieldIndex(_IndexBase):
    kind: Literal["multi_field"] = "multi_field"
    fields: tuple[FieldIndex, ...]

    @field_validator("fields", mode="before")
    @classmethod
    def _coerce_fields(cls, value: Any) -> Any:
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(FieldIndex(field=item) if isinstance(item, str) else item for item in value)
        return value

    @model_validator(mode="after")
    def _validate_field_count(self) -> "MultiFieldIndex":
        if len(self.fields) < 2:
            raise InvalidIndexDefinition("MultiFieldIndex should contain at least two fields")
        return self

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field_index.field for field_index in self.fields)

    @classmethod
    def for_fields(cls, field_names: Sequence[str], unique: bool = False) -> "MultiFieldIndex":
        return cls(fields=field_names, unique=unique)

    @classmethod
    def named_for_fields(
        cls,
        name: str,
        field_names: Sequence[str],
        unique: bool = False,
    ) -> "MultiFieldIndex":
        return cls(name=name, fields=field_names, unique=unique)


Index = Annotated[Union[FieldIndex, MultiFieldIndex], Field(discriminator="kind")]

_index_adapter: TypeAdapter[Index] = TypeAdapter(Index)


def index_from_record(data: Mapping[str, Any] | str) -> FieldIndex | MultiFieldIndex:
    """Build an index declaration from a record or its JSON text."""
    if isinstance(data, str):
        return _index_adapter.validate_json(data)
    return _index_adapter.validate_python(data)


__all__ = ["Index", "FieldIndex", "MultiFieldIndex", "index_from_record"]
