"""Integration tests for the schema-tree pytest plugin.

These tests verify that the schema_session fixture is auto-discovered via the
pytest11 entry point and behaves correctly.

NOTE: These tests require schema-tree to be installed (even in editable mode
via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

from typing import Any

from schema_tree import EditorConfig, Node, PrimitiveType
from schema_tree.documents import ErDocument, JsonDocument, XmlDocument


def test_default_session_is_json(schema_session: Any) -> None:
    """Calling the factory with no arguments opens an empty JSON document."""
    session = schema_session()
    assert isinstance(session.document, JsonDocument)
    assert session.project() == {}


def test_each_dialect(schema_session: Any) -> None:
    """The dialect name selects the document type."""
    assert isinstance(schema_session("er").document, ErDocument)
    assert isinstance(schema_session("xml").document, XmlDocument)


def test_sessions_are_isolated(schema_session: Any) -> None:
    """Every call gets its own collection and store."""
    first = schema_session()
    second = schema_session()
    first.insert(None, Node.scalar("a"))
    assert second.nodes == ()
    assert first.collection is not second.collection


def test_metadata_and_config_are_forwarded(schema_session: Any) -> None:
    """Extra keyword arguments reach the document; config reaches the session."""
    session = schema_session("xml", name="Library", root_element="library",
                             config=EditorConfig(history_limit=2))
    assert session.document.name == "Library"
    assert session.document.root_element == "library"
    assert session.history.limit == 2


def test_fixture_supports_full_edit_cycle(schema_session: Any) -> None:
    """Insert, project, undo through a fixture-provided session."""
    session = schema_session("json")
    session.insert(None, Node.scalar("age", PrimitiveType.NUMBER, default_value=30))
    assert session.project() == {"age": 30}
    session.undo()
    assert session.project() == {}
