"""DocumentStore Protocol: the persistence extension point.

Any object with conformant ``load`` and ``save`` methods can persist a
document collection; no inheritance is required.

Example::

    from schema_tree.protocols import DocumentStore

    class RedisStore:
        def load(self, key: str) -> list[dict] | None: ...
        def save(self, key: str, documents: list[dict]) -> None: ...

    assert isinstance(RedisStore(), DocumentStore)  # structural conformance
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["DocumentStore"]


@runtime_checkable
class DocumentStore(Protocol):
    """Structural protocol for key-value stores of document collections.

    ``load`` returns the wire-form documents saved under ``key``, or None
    when nothing was saved yet. ``save`` replaces whatever was stored under
    ``key``. Either may raise ``OSError`` or ``ValueError``; the collection
    logs those and carries on with its in-memory state.
    """

    def load(self, key: str) -> list[dict[str, Any]] | None: ...

    def save(self, key: str, documents: list[dict[str, Any]]) -> None: ...
