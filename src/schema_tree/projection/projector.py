"""Example Projector: one entry point for every dialect.

``project`` is a pure function of the document. It never mutates its input
and returns identical output for identical input.
"""

from __future__ import annotations

from schema_tree.dialects import ER_DIALECT, JSON_DIALECT, Dialect, DialectName
from schema_tree.documents import Document, ErDocument, JsonDocument, XmlDocument
from schema_tree.projection.json_example import JsonProjector, JsonValue
from schema_tree.projection.xml_example import XmlProjector
from schema_tree.tree.nodes import Node

__all__ = ["project", "project_element", "project_node"]


def project(document: Document, xml_indent: str = "  ") -> JsonValue:
    """Project ``document`` into example output.

    Returns:
        A JSON value for JSON and ER documents; XML text (``str``) for XML
        documents.
    """
    if isinstance(document, XmlDocument):
        return XmlProjector(indent=xml_indent).render_document(document)
    if isinstance(document, ErDocument):
        names = {entity.id: entity.name for entity in document.nodes}
        return JsonProjector(ER_DIALECT, names).project_document(document)
    if isinstance(document, JsonDocument):
        return JsonProjector(JSON_DIALECT).project_document(document)
    msg = f"cannot project document type {type(document).__name__}"
    raise TypeError(msg)


def project_node(node: Node, dialect: Dialect = JSON_DIALECT) -> JsonValue:
    """Project a single node (and its subtree).

    XML nodes are rendered as an element at depth 0; every other dialect
    yields a JSON value.
    """
    if dialect.name is DialectName.XML:
        return project_element(node)
    return JsonProjector(dialect).project_node(node)


def project_element(node: Node, indent: int = 0, unit: str = "  ") -> str:
    """Render one XML element at nesting depth ``indent``."""
    return XmlProjector(indent=unit).render_element(node, depth=indent)
