"""Document types: a named forest of top-level nodes plus root metadata.

Documents are frozen like nodes. ``with_nodes`` and ``touch`` return new
documents with a refreshed ``updated_at`` so history snapshots stay valid.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from schema_tree.ids import now_ms
from schema_tree.tree.nodes import Node

__all__ = [
    "Document",
    "ErDocument",
    "JsonDocument",
    "Relationship",
    "RelationshipType",
    "RootType",
    "XmlDocument",
]


class RootType(StrEnum):
    OBJECT = "object"
    ARRAY = "array"


class RelationshipType(StrEnum):
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


@dataclass(frozen=True, slots=True)
class Relationship:
    """A link between two entities, optionally pinned to specific fields.

    Endpoints are cleared (set to None) rather than the relationship being
    removed when the node they point at is deleted.
    """

    id: str
    from_entity_id: str | None
    to_entity_id: str | None
    type: RelationshipType = RelationshipType.ONE_TO_MANY
    from_field_id: str | None = None
    to_field_id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", RelationshipType(self.type))

    def without_endpoints(self, ids: set[str]) -> Relationship:
        """Copy with every endpoint that names one of ``ids`` cleared."""
        changes: dict[str, Any] = {}
        for attr in ("from_entity_id", "to_entity_id", "from_field_id", "to_field_id"):
            if getattr(self, attr) in ids:
                changes[attr] = None
        return replace(self, **changes) if changes else self


@dataclass(frozen=True, slots=True)
class Document:
    """A named schema: the top-level forest plus timestamps (epoch ms)."""

    id: str
    name: str
    description: str | None = None
    nodes: tuple[Node, ...] = ()
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def with_nodes(self, nodes: Iterable[Node]) -> Document:
        return replace(self, nodes=tuple(nodes), updated_at=now_ms())

    def touch(self, **changes: Any) -> Document:
        """Copy with ``changes`` applied and ``updated_at`` refreshed."""
        return replace(self, **changes, updated_at=now_ms())


@dataclass(frozen=True, slots=True)
class JsonDocument(Document):
    root_type: RootType = RootType.OBJECT

    def __post_init__(self) -> None:
        super(JsonDocument, self).__post_init__()
        object.__setattr__(self, "root_type", RootType(self.root_type))


@dataclass(frozen=True, slots=True)
class XmlDocument(Document):
    root_element: str = "root"
    namespace: str | None = None
    namespace_prefix: str | None = None


@dataclass(frozen=True, slots=True)
class ErDocument(Document):
    """Entity/relationship schema. Top-level nodes are the entities."""

    relationships: tuple[Relationship, ...] = ()

    def __post_init__(self) -> None:
        super(ErDocument, self).__post_init__()
        object.__setattr__(self, "relationships", tuple(self.relationships))

    def with_relationships(self, relationships: Iterable[Relationship]) -> ErDocument:
        return replace(self, relationships=tuple(relationships), updated_at=now_ms())

    def without_references(self, ids: set[str]) -> ErDocument:
        """Clear every relationship endpoint that names a node in ``ids``."""
        return replace(
            self,
            relationships=tuple(r.without_endpoints(ids) for r in self.relationships),
        )
