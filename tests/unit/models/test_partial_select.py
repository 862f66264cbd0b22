import pytest
from pydantic import ValidationError

from docstore.models.partial_select import MERGE_ALIAS, FieldAlias, PartialSelect


def test_from_field_list_accepts_plain_and_aliased_fields() -> None:
    partial_select = PartialSelect.from_field_list(
        ["topLevelField", ("aliasName", "anotherField"), ("nested.alias", "nested.field"), (MERGE_ALIAS, "merged")]
    )

    assert partial_select.field_alias_map() == [
        ("topLevelField", "topLevelField"),
        ("anotherField", "aliasName"),
        ("nested.field", "nested.alias"),
        ("merged", MERGE_ALIAS),
    ]


def test_builder_methods_return_new_instances() -> None:
    base = PartialSelect()

    extended = base.with_field("a").with_field_alias("b.c", "c").with_merged_field("d")

    assert base.fields == ()
    assert extended.field_alias_map() == [("a", "a"), ("b.c", "c"), ("d", MERGE_ALIAS)]
    assert extended.fields[2].is_merge


def test_rejects_invalid_entries() -> None:
    with pytest.raises(TypeError):
        PartialSelect.from_field_list([("only-one",)])
    with pytest.raises(ValidationError):
        FieldAlias(field="", alias="a")
    with pytest.raises(ValidationError):
        FieldAlias(field="a", alias="x..y")


def test_merge_alias_constant() -> None:
    assert PartialSelect.MERGE_ALIAS == "$merge"
