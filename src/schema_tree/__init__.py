"""schema-tree - edit, undo and project schema trees in ER, JSON and XML dialects."""

from __future__ import annotations

from schema_tree.cache import ProjectionCache
from schema_tree.codec import export_collection, export_document
from schema_tree.collection import DocumentCollection
from schema_tree.config import EditorConfig
from schema_tree.dialects import (
    DIALECTS,
    ER_DIALECT,
    JSON_DIALECT,
    XML_DIALECT,
    Dialect,
    DialectName,
    dialect_of,
    get_dialect,
)
from schema_tree.documents import (
    Document,
    ErDocument,
    JsonDocument,
    Relationship,
    RelationshipType,
    RootType,
    XmlDocument,
)
from schema_tree.errors import (
    DocumentNotFoundError,
    InvalidImportError,
    InvalidNodeError,
    SchemaTreeError,
    UnsupportedOperationError,
)
from schema_tree.history import History
from schema_tree.projection import project, project_element, project_node
from schema_tree.samples import sample_schemas
from schema_tree.session import EditingSession
from schema_tree.storage import JsonFileStore, MemoryStore
from schema_tree.tree import (
    ArrayItem,
    ArrayItemKind,
    Attribute,
    AttributeType,
    Constraints,
    Direction,
    Node,
    NodeKind,
    PrimitiveType,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "DIALECTS",
    "ER_DIALECT",
    "JSON_DIALECT",
    "XML_DIALECT",
    "ArrayItem",
    "ArrayItemKind",
    "Attribute",
    "AttributeType",
    "Constraints",
    "Dialect",
    "DialectName",
    "Direction",
    "Document",
    "DocumentCollection",
    "DocumentNotFoundError",
    "EditingSession",
    "EditorConfig",
    "ErDocument",
    "History",
    "InvalidImportError",
    "InvalidNodeError",
    "JsonDocument",
    "JsonFileStore",
    "MemoryStore",
    "Node",
    "NodeKind",
    "PrimitiveType",
    "ProjectionCache",
    "Relationship",
    "RelationshipType",
    "RootType",
    "SchemaTreeError",
    "UnsupportedOperationError",
    "XmlDocument",
    "dialect_of",
    "export_collection",
    "export_document",
    "get_dialect",
    "project",
    "project_element",
    "project_node",
    "sample_schemas",
]
