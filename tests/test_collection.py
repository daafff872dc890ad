"""Tests for DocumentCollection: persistence, membership, import and export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from schema_tree.codec import encode_document
from schema_tree.collection import DocumentCollection
from schema_tree.config import EditorConfig
from schema_tree.dialects import ER_DIALECT, JSON_DIALECT, XML_DIALECT
from schema_tree.documents import ErDocument, JsonDocument, RootType, XmlDocument
from schema_tree.errors import InvalidImportError
from schema_tree.samples import sample_schemas
from schema_tree.session import EditingSession
from schema_tree.storage import JsonFileStore, MemoryStore
from schema_tree.tree.nodes import Node


class FailingStore:
    """Store whose every call raises, to exercise best-effort persistence."""

    def __init__(self) -> None:
        self.save_calls = 0

    def load(self, key: str) -> list[dict[str, Any]] | None:
        raise OSError("disk unavailable")

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        self.save_calls += 1
        raise OSError("disk full")


class UnreachableStore(MemoryStore):
    """Backend that raises a non-IO error on every write."""

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        raise RuntimeError("backend down")


class BrokenReadStore(MemoryStore):
    def load(self, key: str) -> list[dict[str, Any]] | None:
        raise RuntimeError("backend down")


class TestMembership:
    def test_create_adds_and_saves(self) -> None:
        store = MemoryStore()
        collection = DocumentCollection(JSON_DIALECT, store)
        document = collection.create("User", "a user", root_type=RootType.ARRAY)
        assert isinstance(document, JsonDocument)
        assert document.root_type is RootType.ARRAY
        assert collection.get(document.id) is document
        saved = store.load("json-schema-builder-schemas")
        assert saved is not None and saved[0]["name"] == "User"

    def test_create_xml_metadata(self) -> None:
        collection = DocumentCollection(XML_DIALECT)
        document = collection.create("Lib", root_element="library")
        assert isinstance(document, XmlDocument)
        assert document.root_element == "library"

    def test_get_unknown(self) -> None:
        assert DocumentCollection(JSON_DIALECT).get("missing") is None

    def test_add_rejects_other_dialect(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        with pytest.raises(TypeError, match="json"):
            collection.add(XmlDocument(id="x", name="x"))

    def test_replace(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        document = collection.create("a")
        renamed = document.touch(name="b")
        assert collection.replace(renamed)
        assert collection.get(document.id) is renamed
        assert not collection.replace(JsonDocument(id="other", name="x"))

    def test_remove(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        document = collection.create("a")
        assert collection.remove(document.id)
        assert collection.documents == ()
        assert not collection.remove(document.id)

    def test_documents_keep_insertion_order(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        for name in ("a", "b", "c"):
            collection.create(name)
        assert [d.name for d in collection.documents] == ["a", "b", "c"]


class TestPersistence:
    def test_loads_saved_documents(self) -> None:
        store = MemoryStore()
        original = DocumentCollection(JSON_DIALECT, store)
        document = original.create("User")
        reopened = DocumentCollection(JSON_DIALECT, store)
        assert reopened.get(document.id) == document

    def test_load_runs_once(self) -> None:
        store = MemoryStore()
        collection = DocumentCollection(JSON_DIALECT, store)
        collection.load()
        store.save(JSON_DIALECT.storage_key, [encode_document(JsonDocument(id="late", name="x"))])
        collection.load()
        assert collection.get("late") is None

    def test_file_store_round_trip(self, tmp_path: Path) -> None:
        collection = DocumentCollection(ER_DIALECT, JsonFileStore(tmp_path))
        document = collection.create("Shop")
        assert (tmp_path / "schema-designer-schemas.json").exists()
        reopened = DocumentCollection(ER_DIALECT, JsonFileStore(tmp_path))
        assert reopened.get(document.id) == document

    def test_load_failure_is_swallowed(self) -> None:
        collection = DocumentCollection(JSON_DIALECT, FailingStore())
        assert collection.documents == ()

    def test_save_failure_keeps_memory_state(self) -> None:
        store = FailingStore()
        collection = DocumentCollection(JSON_DIALECT, store)
        document = collection.create("a")
        assert store.save_calls == 1
        assert collection.get(document.id) is document
        assert collection.save() is False

    def test_undecodable_document_is_skipped(self) -> None:
        store = MemoryStore()
        good = encode_document(JsonDocument(id="good", name="ok"))
        store.save(JSON_DIALECT.storage_key, [{"fields": "nope"}, good])
        collection = DocumentCollection(JSON_DIALECT, store)
        assert [d.id for d in collection.documents] == ["good"]


class TestImportExport:
    def test_import_er_document(self) -> None:
        collection = DocumentCollection(ER_DIALECT)
        text = json.dumps(
            {
                "id": "old",
                "name": "Shop",
                "entities": [{"id": "e1", "name": "Customer", "fields": [{"name": "email", "type": "string"}]}],
                "relationships": [],
            }
        )
        document = collection.import_document(text)
        assert isinstance(document, ErDocument)
        assert document.id != "old"
        assert document.nodes[0].children[0].name == "email"
        assert collection.get(document.id) is document

    def test_import_er_rejected(self) -> None:
        collection = DocumentCollection(ER_DIALECT)
        with pytest.raises(InvalidImportError) as exc_info:
            collection.import_document(json.dumps({"entities": []}))
        assert exc_info.value.errors == [
            "Schema must have a valid name",
            "Schema must have a relationships array",
        ]
        assert collection.documents == ()

    def test_import_malformed_json(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        with pytest.raises(InvalidImportError, match="Invalid JSON"):
            collection.import_document("{")
        assert collection.documents == ()

    def test_import_json_document(self) -> None:
        collection = DocumentCollection(JSON_DIALECT)
        document = collection.import_document(
            json.dumps({"name": "User", "fields": [{"key": "name", "type": "string"}]})
        )
        assert document.nodes[0].name == "name"

    def test_export_all_uses_configured_indent(self) -> None:
        collection = DocumentCollection(JSON_DIALECT, config=EditorConfig(export_indent=0))
        collection.create("a")
        text = collection.export_all()
        bundle = json.loads(text)
        assert [s["name"] for s in bundle["schemas"]] == ["a"]
        assert text.startswith('{\n"schemas"')

    def test_node_forest_survives_reload(self) -> None:
        store = MemoryStore()
        collection = DocumentCollection(JSON_DIALECT, store)
        document = collection.create("a")
        collection.replace(document.with_nodes((Node.object("user", [Node.scalar("name")]),)))
        collection.save()
        reopened = DocumentCollection(JSON_DIALECT, store)
        reloaded = reopened.get(document.id)
        assert reloaded is not None
        assert reloaded.nodes[0].children[0].name == "name"


class TestStoreErrors:
    def test_unexpected_save_error_keeps_edit(self) -> None:
        collection = DocumentCollection(JSON_DIALECT, UnreachableStore())
        document = collection.create("a")
        session = EditingSession(collection, document.id)
        node_id = session.insert(None, Node.scalar("title"))
        assert node_id is not None
        assert session.find(node_id) is not None
        assert collection.get(document.id) is session.document
        assert collection.save() is False

    def test_unexpected_load_error_starts_empty(self) -> None:
        collection = DocumentCollection(JSON_DIALECT, BrokenReadStore())
        assert collection.documents == ()
        assert collection.create("a") in collection.documents


class TestSeeding:
    def test_empty_store_is_seeded(self) -> None:
        store = MemoryStore()
        collection = DocumentCollection(ER_DIALECT, store, seed=sample_schemas)
        assert [d.name for d in collection.documents] == ["E-commerce System", "Blog Platform"]
        saved = store.load(ER_DIALECT.storage_key)
        assert saved is not None
        assert [s["id"] for s in saved] == ["dummy-ecommerce-1", "dummy-blog-1"]

    def test_stored_documents_win_over_seed(self) -> None:
        store = MemoryStore()
        DocumentCollection(ER_DIALECT, store).create("Mine")
        collection = DocumentCollection(ER_DIALECT, store, seed=sample_schemas)
        assert [d.name for d in collection.documents] == ["Mine"]

    def test_empty_list_is_seeded(self) -> None:
        store = MemoryStore()
        store.save(ER_DIALECT.storage_key, [])
        collection = DocumentCollection(ER_DIALECT, store, seed=sample_schemas)
        assert len(collection.documents) == 2

    def test_no_seed_by_default(self) -> None:
        assert DocumentCollection(ER_DIALECT).documents == ()

    def test_seed_not_used_when_load_fails(self) -> None:
        collection = DocumentCollection(ER_DIALECT, BrokenReadStore(), seed=sample_schemas)
        assert collection.documents == ()
