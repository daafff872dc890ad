"""Dialect strategies: the per-editor vocabulary plugged into the tree engine.

The ER, JSON and XML editors share one tree engine. What differs between them
is captured here as data:

- which node kinds and scalar types are legal,
- which array item variants are legal (shallow for JSON, arbitrarily nested
  for ER, none for XML),
- whether elements carry attributes,
- the canonical example value per primitive used by the projector,
- the persistence key and the wire key holding the top-level forest.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from schema_tree.documents import Document, ErDocument, JsonDocument, XmlDocument
from schema_tree.errors import InvalidNodeError
from schema_tree.tree.nodes import (
    ArrayItem,
    ArrayItemKind,
    Node,
    NodeKind,
    PrimitiveType,
)

__all__ = [
    "DIALECTS",
    "Dialect",
    "DialectName",
    "ER_DIALECT",
    "JSON_DIALECT",
    "XML_DIALECT",
    "dialect_of",
    "get_dialect",
]

P = PrimitiveType


class DialectName(StrEnum):
    ER = "er"
    JSON = "json"
    XML = "xml"


@dataclass(frozen=True, slots=True)
class Dialect:
    """Strategy object describing one schema dialect.

    Attributes:
        name:            Dialect identifier.
        storage_key:     Key under which the document collection is persisted.
        forest_key:      Wire key of the top-level node list
                         (``entities``, ``fields`` or ``elements``).
        document_type:   Document subclass holding the dialect's root metadata.
        kinds:           Node kinds allowed anywhere in the tree.
        root_kinds:      Node kinds allowed at the top level.
        scalar_types:    Legal primitives for SCALAR nodes and primitive items.
        item_kinds:      Legal ArrayItem variants.
        supports_attributes: Whether nodes may carry XML attributes.
        default_item_type:   Primitive assigned to a node that becomes an array.
        scalar_examples: Canonical example per primitive for scalar nodes.
        item_examples:   Canonical example per primitive for array items.
    """

    name: DialectName
    storage_key: str
    forest_key: str
    document_type: type[Document]
    kinds: frozenset[NodeKind]
    root_kinds: frozenset[NodeKind]
    scalar_types: frozenset[PrimitiveType]
    item_kinds: frozenset[ArrayItemKind]
    supports_attributes: bool
    scalar_examples: Mapping[PrimitiveType, Any]
    item_examples: Mapping[PrimitiveType, Any]
    default_item_type: PrimitiveType = PrimitiveType.STRING

    @property
    def recursive_arrays(self) -> bool:
        """True when arrays may nest (array of arrays)."""
        return ArrayItemKind.ARRAY in self.item_kinds

    def scalar_example(self, primitive: PrimitiveType) -> Any:
        return self.scalar_examples.get(primitive)

    def item_example(self, primitive: PrimitiveType) -> Any:
        return self.item_examples.get(primitive)

    def default_payload(self, kind: NodeKind) -> dict[str, Any]:
        """Payload a node takes on when it switches to ``kind``.

        Every kind-specific field is reset, so nothing from the previous kind
        survives the switch.
        """
        payload: dict[str, Any] = {
            "primitive": None,
            "default_value": None,
            "constraints": None,
            "children": (),
            "item": None,
            "reference_id": None,
            "text_content": None,
        }
        if kind is NodeKind.SCALAR:
            payload["primitive"] = PrimitiveType.STRING
        elif kind is NodeKind.ARRAY:
            payload["item"] = ArrayItem.of_primitive(self.default_item_type)
        return payload

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_root(self, node: Node) -> None:
        if node.kind not in self.root_kinds:
            msg = f"{self.name} dialect does not allow {node.kind} nodes at the root"
            raise InvalidNodeError(msg)
        self.check_node(node)

    def check_node(self, node: Node) -> None:
        """Raise InvalidNodeError if ``node`` or any descendant is illegal here."""
        if node.kind not in self.kinds:
            msg = f"{self.name} dialect does not allow {node.kind} nodes ({node.name!r})"
            raise InvalidNodeError(msg)
        if node.primitive is not None and node.primitive not in self.scalar_types:
            msg = f"{self.name} dialect does not allow {node.primitive} scalars"
            raise InvalidNodeError(msg)
        if node.attributes and not self.supports_attributes:
            msg = f"{self.name} dialect does not support attributes ({node.name!r})"
            raise InvalidNodeError(msg)
        if node.item is not None:
            self.check_item(node.item)
        for child in node.children:
            self.check_node(child)

    def check_item(self, item: ArrayItem) -> None:
        if item.kind not in self.item_kinds:
            msg = f"{self.name} dialect does not allow {item.kind} array items"
            raise InvalidNodeError(msg)
        if item.primitive is not None and item.primitive not in self.scalar_types:
            msg = f"{self.name} dialect does not allow {item.primitive} array items"
            raise InvalidNodeError(msg)
        for shape_field in item.fields:
            self.check_node(shape_field)
        if item.item is not None:
            self.check_item(item.item)


ER_DIALECT = Dialect(
    name=DialectName.ER,
    storage_key="schema-designer-schemas",
    forest_key="entities",
    document_type=ErDocument,
    kinds=frozenset(NodeKind),
    root_kinds=frozenset({NodeKind.OBJECT}),
    scalar_types=frozenset({P.STRING, P.NUMBER, P.BOOLEAN, P.DATE, P.NULL, P.UNDEFINED}),
    item_kinds=frozenset(ArrayItemKind),
    supports_attributes=False,
    scalar_examples=MappingProxyType(
        {
            P.STRING: "example string",
            P.NUMBER: 0,
            P.BOOLEAN: False,
            P.DATE: "2024-01-01",
            P.NULL: None,
            P.UNDEFINED: None,
        }
    ),
    item_examples=MappingProxyType(
        {
            P.STRING: "item",
            P.NUMBER: 1,
            P.BOOLEAN: True,
            P.DATE: "2024-01-01",
            P.NULL: None,
            P.UNDEFINED: None,
        }
    ),
)

JSON_DIALECT = Dialect(
    name=DialectName.JSON,
    storage_key="json-schema-builder-schemas",
    forest_key="fields",
    document_type=JsonDocument,
    kinds=frozenset({NodeKind.SCALAR, NodeKind.OBJECT, NodeKind.ARRAY}),
    root_kinds=frozenset({NodeKind.SCALAR, NodeKind.OBJECT, NodeKind.ARRAY}),
    scalar_types=frozenset({P.STRING, P.NUMBER, P.BOOLEAN, P.NULL}),
    item_kinds=frozenset({ArrayItemKind.PRIMITIVE, ArrayItemKind.OBJECT}),
    supports_attributes=False,
    scalar_examples=MappingProxyType(
        {P.STRING: "example string", P.NUMBER: 0, P.BOOLEAN: False, P.NULL: None}
    ),
    item_examples=MappingProxyType(
        {P.STRING: "item", P.NUMBER: 1, P.BOOLEAN: True, P.NULL: None}
    ),
)

XML_DIALECT = Dialect(
    name=DialectName.XML,
    storage_key="xml-schema-builder-schemas",
    forest_key="elements",
    document_type=XmlDocument,
    kinds=frozenset({NodeKind.SCALAR, NodeKind.OBJECT}),
    root_kinds=frozenset({NodeKind.SCALAR, NodeKind.OBJECT}),
    scalar_types=frozenset({P.STRING, P.NUMBER, P.BOOLEAN, P.DATE, P.TEXT}),
    item_kinds=frozenset(),
    supports_attributes=True,
    scalar_examples=MappingProxyType({}),
    item_examples=MappingProxyType({}),
)

DIALECTS: Mapping[DialectName, Dialect] = MappingProxyType(
    {d.name: d for d in (ER_DIALECT, JSON_DIALECT, XML_DIALECT)}
)


def get_dialect(name: str | DialectName) -> Dialect:
    """Look up a dialect by name (``"er"``, ``"json"`` or ``"xml"``)."""
    try:
        return DIALECTS[DialectName(name)]
    except ValueError:
        msg = f"unknown dialect {name!r}; expected one of {sorted(DIALECTS)}"
        raise ValueError(msg) from None


def dialect_of(document: Document) -> Dialect:
    """The dialect a document belongs to, from its concrete type."""
    for dialect in DIALECTS.values():
        if type(document) is dialect.document_type:
            return dialect
    msg = f"no dialect for document type {type(document).__name__}"
    raise TypeError(msg)
