"""Partial select: project a subset of fields out of a stored document.

Each entry maps a source field to a destination alias; both use dot notation.
A field that does not exist in the document is projected as ``None``.

The reserved ``$merge`` alias copies all keys of the mapping stored at the
source field into the top level of the result::

    PartialSelect.from_field_list([("$merge", "nested"), "topLevelField"])

projects ``{"topLevelField": "x", "nested": {"subField": "y"}}`` to
``{"subField": "y", "topLevelField": "x"}``.
"""

from collections.abc import Iterable
from typing import ClassVar

from pydantic import Field, field_validator

from docstore.models.base import FrozenModel, ensure_dot_path

MERGE_ALIAS = "$merge"


class FieldAlias(FrozenModel):
    field: str
    alias: str

    @field_validator("field")
    @classmethod
    def _validate_field(cls, value: str) -> str:
        return ensure_dot_path(value, "field")

    @field_validator("alias")
    @classmethod
    def _validate_alias(cls, value: str) -> str:
        if value == MERGE_ALIAS:
            return value
        return ensure_dot_path(value, "alias")

    @property
    def is_merge(self) -> bool:
        return self.alias == MERGE_ALIAS


class PartialSelect(FrozenModel):
    MERGE_ALIAS: ClassVar[str] = MERGE_ALIAS

    fields: tuple[FieldAlias, ...] = Field(default_factory=tuple)

    @classmethod
    def from_field_list(cls, field_list: Iterable[str | tuple[str, str]]) -> "PartialSelect":
        """Build a select from plain fields and ``(alias, field)`` pairs."""
        entries = []
        for item in field_list:
            if isinstance(item, str):
                entries.append(FieldAlias(field=item, alias=item))
            elif isinstance(item, tuple) and len(item) == 2:
                alias, field = item
                entries.append(FieldAlias(field=field, alias=alias))
            else:
                raise TypeError(f"expected field name or (alias, field) pair, got {item!r}")
        return cls(fields=tuple(entries))

    def with_field(self, field: str) -> "PartialSelect":
        return self._append(FieldAlias(field=field, alias=field))

    def with_field_alias(self, field: str, alias: str) -> "PartialSelect":
        return self._append(FieldAlias(field=field, alias=alias))

    def with_merged_field(self, field: str) -> "PartialSelect":
        return self._append(FieldAlias(field=field, alias=MERGE_ALIAS))

    def field_alias_map(self) -> list[tuple[str, str]]:
        return [(entry.field, entry.alias) for entry in self.fields]

    def _append(self, entry: FieldAlias) -> "PartialSelect":
        return self.model_copy(update={"fields": (*self.fields, entry)})


__all__ = ["MERGE_ALIAS", "FieldAlias", "PartialSelect"]
