"""pytest plugin for schema-tree.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.
"""

from __future__ import annotations

from typing import Any

import pytest

from schema_tree.collection import DocumentCollection
from schema_tree.config import EditorConfig
from schema_tree.dialects import DialectName, get_dialect
from schema_tree.session import EditingSession
from schema_tree.storage import MemoryStore


@pytest.fixture
def schema_session() -> Any:
    """Fixture that returns a factory of in-memory editing sessions.

    Every call creates a fresh collection backed by its own ``MemoryStore``,
    adds one empty document and opens a session on it. Sessions opened by
    the factory are closed at teardown.

    Usage in tests::

        def test_insert(schema_session):
            session = schema_session("json")
            session.insert(None, Node.scalar("title"))
            assert session.project() == {"title": "example string"}

    Returns:
        A callable ``_open(dialect="json", name="Untitled", config=None,
        **metadata) -> EditingSession``.
    """
    opened: list[EditingSession] = []

    def _open(
        dialect: DialectName | str = DialectName.JSON,
        name: str = "Untitled",
        config: EditorConfig | None = None,
        **metadata: Any,
    ) -> EditingSession:
        collection = DocumentCollection(get_dialect(dialect), MemoryStore(), config)
        document = collection.create(name, **metadata)
        session = EditingSession(collection, document.id)
        opened.append(session)
        return session

    yield _open

    for session in opened:
        session.close()
