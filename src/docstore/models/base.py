from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict

T_Model = TypeVar("T_Model", bound="FrozenModel")


class FrozenModel(BaseModel):
    """Immutable base for query building blocks, with record helpers."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls: Type[T_Model], data: Mapping[str, Any] | BaseModel) -> T_Model:
        return cls.model_validate(data)


def ensure_non_empty_text(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    if not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value


def ensure_dot_path(value: str, field_name: str) -> str:
    ensure_non_empty_text(value, field_name)
    if any(not segment for segment in value.split(".")):
        raise ValueError(f"{field_name} must not contain empty path segments")
    return value
