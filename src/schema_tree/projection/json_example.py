"""JsonProjector: generate example JSON values from a schema tree.

Used for the JSON and ER dialects. Output is fully determined by the tree
and the dialect's canonical examples: no randomness, no clock.

Per node kind:
- SCALAR:    the default value coerced to the declared primitive, else the
             dialect's canonical example for that primitive.
- OBJECT:    a dict of child name -> projected child, in child order.
- ARRAY:     a one-element list holding an example item; ``[]`` when the
             item is an empty object shape.
- REFERENCE: ``{"$ref": <entity name>}`` (the raw id when the entity is
             not in the document, None when unset).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from schema_tree.dialects import JSON_DIALECT, Dialect
from schema_tree.documents import ErDocument, JsonDocument, RootType
from schema_tree.tree.nodes import ArrayItem, ArrayItemKind, Node, NodeKind, PrimitiveType

__all__ = ["JsonProjector", "JsonValue", "coerce_default", "format_scalar"]

JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


def coerce_default(value: Any, primitive: PrimitiveType, fallback: Any) -> Any:
    """Coerce a stored default to the JSON type of ``primitive``.

    Numbers become int when integral; a value that is not numeric yields
    ``fallback``. Booleans are True only for ``True`` or the string "true".
    """
    if primitive is PrimitiveType.NUMBER:
        return _to_number(value, fallback)
    if primitive is PrimitiveType.BOOLEAN:
        return value is True or value == "true"
    if primitive in (PrimitiveType.NULL, PrimitiveType.UNDEFINED):
        return None
    return format_scalar(value)


def format_scalar(value: Any) -> str:
    """Render a stored value as text: lowercase booleans, integral floats without ".0"."""
    # CRITICAL: bool before str() so True renders as "true", not "True"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any, fallback: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return int(number) if number.is_integer() else number


@dataclass
class JsonProjector:
    """Projects nodes into example JSON values.

    Attributes:
        dialect:      Supplies canonical examples per primitive.
        entity_names: Entity id -> entity name, used to label references.
    """

    dialect: Dialect = JSON_DIALECT
    entity_names: Mapping[str, str] = field(default_factory=dict)

    def project_document(self, document: JsonDocument | ErDocument) -> JsonValue:
        """Project a whole document.

        JSON documents follow their root type (object -> dict keyed by field
        name, array -> list of projected fields). ER documents become a dict
        keyed by entity name.
        """
        if isinstance(document, JsonDocument) and document.root_type is RootType.ARRAY:
            return [self.project_node(node) for node in document.nodes]
        return self.project_fields(document.nodes)

    def project_fields(self, nodes: Iterable[Node]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for node in nodes:
            result[node.name] = self.project_node(node)
        return result

    def project_node(self, node: Node) -> JsonValue:
        if node.kind is NodeKind.SCALAR:
            return self._project_scalar(node)
        if node.kind is NodeKind.OBJECT:
            return self.project_fields(node.children)
        if node.kind is NodeKind.ARRAY:
            assert node.item is not None
            return self._project_array(node.item)
        return self._reference(node.reference_id)

    def _project_scalar(self, node: Node) -> JsonValue:
        assert node.primitive is not None
        canonical = self.dialect.scalar_example(node.primitive)
        if node.default_value is None:
            return canonical
        return coerce_default(node.default_value, node.primitive, canonical)

    def _project_array(self, item: ArrayItem) -> list[Any]:
        if item.kind is ArrayItemKind.OBJECT and not item.fields:
            return []
        return [self._project_item(item)]

    def _project_item(self, item: ArrayItem) -> JsonValue:
        if item.kind is ArrayItemKind.PRIMITIVE:
            assert item.primitive is not None
            return self.dialect.item_example(item.primitive)
        if item.kind is ArrayItemKind.OBJECT:
            return self.project_fields(item.fields)
        if item.kind is ArrayItemKind.ARRAY:
            assert item.item is not None
            return self._project_array(item.item)
        return self._reference(item.entity_id)

    def _reference(self, entity_id: str | None) -> JsonValue:
        if entity_id is None:
            return None
        return {"$ref": self.entity_names.get(entity_id, entity_id)}
