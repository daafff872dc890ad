"""EditingSession: one open document with undo/redo.

A session is the only writer of its document while it is open. Each
operation follows the same sequence:

1. the Tree Mutator derives a new forest from the present document;
2. if nothing changed (unknown id, edge move, identical values) the
   operation returns without touching history or storage;
3. otherwise the new document is recorded in History, swapped into the
   collection, and the collection is saved (best-effort).

Undo and redo swap snapshots the same way and also save. Projection never
mutates; its results are memoised per document object.
"""

from __future__ import annotations

from typing import Any

import structlog

from schema_tree.cache import ProjectionCache
from schema_tree.codec import decode_nodes, export_document, parse_json
from schema_tree.collection import DocumentCollection
from schema_tree.dialects import DialectName
from schema_tree.documents import Document, ErDocument, Relationship, RelationshipType
from schema_tree.errors import (
    DocumentNotFoundError,
    InvalidImportError,
    SchemaTreeError,
    UnsupportedOperationError,
)
from schema_tree.history import History
from schema_tree.ids import generate_id
from schema_tree.tree import mutator
from schema_tree.tree.locator import collect_ids, find
from schema_tree.tree.mutator import Direction
from schema_tree.tree.nodes import Attribute, Node

__all__ = ["EditingSession"]

logger = structlog.get_logger()

_DOCUMENT_FIELDS: dict[DialectName, frozenset[str]] = {
    DialectName.JSON: frozenset({"name", "description", "root_type"}),
    DialectName.XML: frozenset(
        {"name", "description", "root_element", "namespace", "namespace_prefix"}
    ),
    DialectName.ER: frozenset({"name", "description"}),
}
_RELATIONSHIP_FIELDS = frozenset(
    {"from_entity_id", "to_entity_id", "type", "from_field_id", "to_field_id", "name"}
)


class EditingSession:
    """Edit one document of a collection with full undo/redo.

    Args:
        collection:  Collection holding the document.
        document_id: Id of the document to open.

    Raises:
        DocumentNotFoundError: The collection has no such document.
    """

    def __init__(self, collection: DocumentCollection, document_id: str) -> None:
        document = collection.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        self.collection = collection
        self.dialect = collection.dialect
        self.config = collection.config
        self._history: History | None = History(document, limit=self.config.history_limit)
        self._projections = ProjectionCache(
            max_size=self.config.projection_cache_size,
            xml_indent=self.config.xml_indent,
        )
        logger.debug("session_opened", document_id=document_id, dialect=str(self.dialect.name))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def history(self) -> History:
        if self._history is None:
            msg = "session is closed"
            raise SchemaTreeError(msg)
        return self._history

    @property
    def document(self) -> Document:
        return self.history.present

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self.document.nodes

    @property
    def closed(self) -> bool:
        return self._history is None

    def close(self) -> None:
        """Discard history. The last saved document stays in the collection."""
        if self._history is not None:
            logger.debug("session_closed", document_id=self._history.present.id)
        self._history = None
        self._projections.clear()

    def find(self, node_id: str) -> Node | None:
        location = find(self.nodes, node_id)
        return location.node if location is not None else None

    def _commit(self, document: Document, event: str, **context: Any) -> None:
        self.history.record(document)
        self.collection.replace(document)
        self.collection.save()
        logger.debug(event, document_id=document.id, **context)

    def _commit_nodes(self, nodes: tuple[Node, ...], event: str, **context: Any) -> None:
        self._commit(self.document.with_nodes(nodes), event, **context)

    # ------------------------------------------------------------------
    # Node mutations
    # ------------------------------------------------------------------

    def insert(self, parent_id: str | None, node: Node) -> str | None:
        """Add ``node`` under ``parent_id`` (top level when None).

        Returns:
            The id given to the inserted node, or None if nothing happened.
        """
        nodes, new_id = mutator.insert(self.nodes, parent_id, node, self.dialect)
        if new_id is None:
            return None
        self._commit_nodes(nodes, "node_inserted", node_id=new_id, parent_id=parent_id)
        return new_id

    def update(self, node_id: str, **changes: Any) -> bool:
        nodes = mutator.update(self.nodes, node_id, self.dialect, **changes)
        if nodes is self.nodes:
            return False
        self._commit_nodes(nodes, "node_updated", node_id=node_id, fields=sorted(changes))
        return True

    def delete(self, node_id: str) -> bool:
        """Remove a node and its subtree.

        In the ER dialect every relationship endpoint that pointed at a
        removed entity or field is cleared; the relationship itself stays.
        """
        nodes, removed = mutator.delete(self.nodes, node_id)
        if removed is None:
            return False
        document = self.document.with_nodes(nodes)
        if isinstance(document, ErDocument):
            document = document.without_references(set(collect_ids((removed,))))
        self._commit(document, "node_deleted", node_id=node_id)
        return True

    def move(self, node_id: str, direction: Direction | str) -> bool:
        nodes = mutator.move(self.nodes, node_id, direction)
        if nodes is self.nodes:
            return False
        self._commit_nodes(nodes, "node_moved", node_id=node_id, direction=str(direction))
        return True

    # ------------------------------------------------------------------
    # Attributes (XML)
    # ------------------------------------------------------------------

    def add_attribute(self, element_id: str, attribute: Attribute) -> str | None:
        nodes, new_id = mutator.add_attribute(self.nodes, element_id, attribute, self.dialect)
        if new_id is None:
            return None
        self._commit_nodes(nodes, "attribute_added", node_id=element_id, attribute_id=new_id)
        return new_id

    def update_attribute(self, element_id: str, attribute_id: str, **changes: Any) -> bool:
        nodes = mutator.update_attribute(self.nodes, element_id, attribute_id, **changes)
        if nodes is self.nodes:
            return False
        self._commit_nodes(nodes, "attribute_updated", node_id=element_id, attribute_id=attribute_id)
        return True

    def delete_attribute(self, element_id: str, attribute_id: str) -> bool:
        nodes = mutator.delete_attribute(self.nodes, element_id, attribute_id)
        if nodes is self.nodes:
            return False
        self._commit_nodes(nodes, "attribute_deleted", node_id=element_id, attribute_id=attribute_id)
        return True

    # ------------------------------------------------------------------
    # Relationships (ER)
    # ------------------------------------------------------------------

    def _er_document(self) -> ErDocument:
        document = self.document
        if not isinstance(document, ErDocument):
            msg = f"relationships are not available in the {self.dialect.name} dialect"
            raise UnsupportedOperationError(msg)
        return document

    def add_relationship(
        self,
        from_entity_id: str,
        to_entity_id: str,
        type: RelationshipType | str = RelationshipType.ONE_TO_MANY,  # noqa: A002
        *,
        from_field_id: str | None = None,
        to_field_id: str | None = None,
        name: str | None = None,
    ) -> str:
        document = self._er_document()
        relationship = Relationship(
            id=generate_id(),
            from_entity_id=from_entity_id,
            to_entity_id=to_entity_id,
            type=RelationshipType(type),
            from_field_id=from_field_id,
            to_field_id=to_field_id,
            name=name,
        )
        self._commit(
            document.with_relationships((*document.relationships, relationship)),
            "relationship_added",
            relationship_id=relationship.id,
        )
        return relationship.id

    def update_relationship(self, relationship_id: str, **changes: Any) -> bool:
        unknown = set(changes) - _RELATIONSHIP_FIELDS
        if unknown:
            msg = f"cannot update relationship field(s): {', '.join(sorted(unknown))}"
            raise SchemaTreeError(msg)
        document = self._er_document()
        updated = []
        changed = False
        for rel in document.relationships:
            if rel.id == relationship_id:
                new_rel = Relationship(**{**_relationship_fields(rel), **changes})
                changed = new_rel != rel
                rel = new_rel
            updated.append(rel)
        if not changed:
            return False
        self._commit(
            document.with_relationships(updated),
            "relationship_updated",
            relationship_id=relationship_id,
        )
        return True

    def delete_relationship(self, relationship_id: str) -> bool:
        document = self._er_document()
        remaining = [r for r in document.relationships if r.id != relationship_id]
        if len(remaining) == len(document.relationships):
            return False
        self._commit(
            document.with_relationships(remaining),
            "relationship_deleted",
            relationship_id=relationship_id,
        )
        return True

    # ------------------------------------------------------------------
    # Document metadata
    # ------------------------------------------------------------------

    def update_document(self, **changes: Any) -> bool:
        """Change root metadata (name, description, root type/tag, namespace)."""
        allowed = _DOCUMENT_FIELDS[self.dialect.name]
        unknown = set(changes) - allowed
        if unknown:
            msg = f"cannot update document field(s): {', '.join(sorted(unknown))}"
            raise SchemaTreeError(msg)
        document = self.document
        if all(getattr(document, k) == v for k, v in changes.items()):
            return False
        self._commit(document.touch(**changes), "document_updated", fields=sorted(changes))
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        document = self.history.undo()
        if document is None:
            return False
        self.collection.replace(document)
        self.collection.save()
        logger.debug("history_undo", document_id=document.id)
        return True

    def redo(self) -> bool:
        document = self.history.redo()
        if document is None:
            return False
        self.collection.replace(document)
        self.collection.save()
        logger.debug("history_redo", document_id=document.id)
        return True

    # ------------------------------------------------------------------
    # Projection, import, export
    # ------------------------------------------------------------------

    def project(self) -> Any:
        """Example output for the present document (JSON value or XML text)."""
        return self._projections.project(self.document)

    def export(self) -> str:
        return export_document(self.document, indent=self.config.export_indent)

    def import_nodes(self, text: str) -> int:
        """Replace the whole top-level forest with the one in ``text``.

        JSON documents take ``parsed["fields"]``, XML documents take
        ``parsed["elements"]``. Only the shape needed to build nodes is
        checked; the import is recorded in history like any other edit.

        Returns:
            Number of top-level nodes imported.

        Raises:
            InvalidImportError: Malformed JSON or no usable node list. The
                document is left unchanged.
            UnsupportedOperationError: Called on an ER session (ER files are
                imported as new documents through the collection).
        """
        if self.dialect.name is DialectName.ER:
            msg = "ER schemas are imported as new documents via DocumentCollection"
            raise UnsupportedOperationError(msg)
        data = parse_json(text)
        key = self.dialect.forest_key
        if not isinstance(data, dict) or not isinstance(data.get(key), list):
            raise InvalidImportError([f"Imported file must contain a {key!r} array"])
        nodes = decode_nodes(data[key], self.dialect)
        self._commit_nodes(nodes, "nodes_imported", count=len(nodes))
        return len(nodes)


def _relationship_fields(rel: Relationship) -> dict[str, Any]:
    return {
        "id": rel.id,
        "from_entity_id": rel.from_entity_id,
        "to_entity_id": rel.to_entity_id,
        "type": rel.type,
        "from_field_id": rel.from_field_id,
        "to_field_id": rel.to_field_id,
        "name": rel.name,
    }
