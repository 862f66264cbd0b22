import pytest

from docstore.models.enums import ValueKind
from docstore.models.path import NOT_FOUND
from docstore.models.values import compare_for_sort, compare_strict, kind_of, values_equal


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ValueKind.NULL),
        (NOT_FOUND, ValueKind.NULL),
        (True, ValueKind.BOOL),
        (3, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        ("text", ValueKind.STRING),
        ({"a": 1}, ValueKind.MAPPING),
        ([1, 2], ValueKind.SEQUENCE),
        ((1, 2), ValueKind.SEQUENCE),
        (b"raw", ValueKind.OTHER),
    ],
)
def test_kind_of(value, expected) -> None:
    assert kind_of(value) is expected


class TestValuesEqual:
    """Tests for strict, type-aware equality."""

    def test_booleans_never_equal_numbers(self) -> None:
        assert not values_equal(True, 1)
        assert not values_equal(0, False)

    def test_int_and_float_compare_numerically(self) -> None:
        assert values_equal(1, 1.0)

    def test_strings_do_not_coerce_to_numbers(self) -> None:
        assert not values_equal("1", 1)

    def test_none_only_equals_none(self) -> None:
        assert values_equal(None, None)
        assert not values_equal(None, 0)
        assert not values_equal(None, "")

    def test_not_found_never_equals_none(self) -> None:
        assert not values_equal(NOT_FOUND, None)

    def test_nested_structures(self) -> None:
        assert values_equal({"a": [1, {"b": True}]}, {"a": [1, {"b": True}]})
        assert not values_equal({"a": [1, {"b": True}]}, {"a": [1, {"b": 1}]})
        assert not values_equal([1, 2], [1, 2, 3])
        assert not values_equal({"a": 1}, {"a": 1, "b": 2})


class TestCompareStrict:
    """Tests for comparisons used by range filters."""

    def test_numbers(self) -> None:
        assert compare_strict(1, 2) == -1
        assert compare_strict(2.5, 2) == 1
        assert compare_strict(3, 3.0) == 0

    def test_strings_compare_case_sensitively(self) -> None:
        assert compare_strict("B", "a") == -1

    def test_mixed_kinds_are_not_comparable(self) -> None:
        assert compare_strict("10", 5) is None
        assert compare_strict(None, 5) is None
        assert compare_strict(True, 0) is None
        assert compare_strict([1], [0]) is None


class TestCompareForSort:
    """Tests for the total ordering used when sorting."""

    def test_strings_compare_case_insensitively(self) -> None:
        assert compare_for_sort("apple", "Banana") == -1
        assert compare_for_sort("ABC", "abc") == 0

    def test_missing_and_none_sort_first(self) -> None:
        assert compare_for_sort(NOT_FOUND, 1) == -1
        assert compare_for_sort(None, "a") == -1
        assert compare_for_sort(None, NOT_FOUND) == 0

    def test_numbers_sort_before_strings(self) -> None:
        assert compare_for_sort(100, "1") == -1

    def test_booleans_order_with_numbers(self) -> None:
        assert compare_for_sort(False, True) == -1
        assert compare_for_sort(True, 2) == -1

    def test_sequences_compare_elementwise(self) -> None:
        assert compare_for_sort([1, 2], [1, 3]) == -1
        assert compare_for_sort([1, 2], [1]) == 1
