"""Tests for the service factory module."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from docstore.errors import UniqueConstraintViolation
from docstore.models.filter import AnyFilter
from docstore.models.snapshot import StoreSnapshot
from docstore.services.factory import (
    create_document_store,
    create_seeded_document_store,
    load_snapshot,
    parse_select_option,
)
from docstore.services.memory_store import InMemoryDocumentStore


def _make_snapshot() -> dict:
    return {
        "users": {
            "indices": [{"kind": "field", "field": "email", "unique": True, "name": "email_idx"}],
            "documents": {
                "1": {"email": "jane@example.com", "name": "Jane"},
                "2": {"email": "john@example.com", "name": "John"},
            },
        },
        "orders": {},
    }


class TestCreateDocumentStore:
    """Tests for create_document_store factory."""

    def test_creates_empty_store(self) -> None:
        store = create_document_store()

        assert isinstance(store, InMemoryDocumentStore)
        assert store.list_collections() == []

    def test_each_call_creates_independent_store(self) -> None:
        first = create_document_store()
        second = create_document_store()

        first.add_collection("test")

        assert not second.has_collection("test")


class TestCreateSeededDocumentStore:
    """Tests for create_seeded_document_store factory."""

    def test_seeds_collections_indices_and_documents(self) -> None:
        store = create_seeded_document_store(_make_snapshot())

        assert store.list_collections() == ["users", "orders"]
        assert store.has_collection_index("users", "email_idx")
        assert store.get_doc("users", "2") == {"email": "john@example.com", "name": "John"}
        assert store.count_docs("orders", AnyFilter()) == 0

    def test_accepts_snapshot_model(self) -> None:
        store = create_seeded_document_store(StoreSnapshot.from_record(_make_snapshot()))

        assert store.count_docs("users", AnyFilter()) == 2

    def test_enforces_unique_indices_while_seeding(self) -> None:
        snapshot = _make_snapshot()
        snapshot["users"]["documents"]["3"] = {"email": "jane@example.com"}

        with pytest.raises(UniqueConstraintViolation):
            create_seeded_document_store(snapshot)

    def test_rejects_malformed_snapshot(self) -> None:
        with pytest.raises(ValidationError):
            create_seeded_document_store({"users": {"indices": [{"kind": "unknown"}]}})


class TestLoadSnapshot:
    """Tests for reading snapshot files."""

    def test_loads_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(_make_snapshot()), encoding="utf-8")

        snapshot = load_snapshot(path)

        assert list(snapshot.collections()) == ["users", "orders"]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_snapshot(path)


class TestParseSelectOption:
    """Tests for parse_select_option function."""

    def test_plain_field_keeps_its_name(self) -> None:
        assert parse_select_option("some.prop") == ("some.prop", "some.prop")

    def test_field_with_alias(self) -> None:
        assert parse_select_option("some.prop:alias") == ("alias", "some.prop")

    def test_merge_alias(self) -> None:
        assert parse_select_option("nested:$merge") == ("$merge", "nested")
