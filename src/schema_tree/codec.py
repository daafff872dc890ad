"""Wire codec: documents to and from the editor's JSON interchange format.

The interchange format is camelCase JSON with one shape per dialect:

- JSON: ``{"rootType", "fields": [{"key", "type", "nestedFields",
  "arrayItemType": "<primitive>" | [fields], ...}]}``
- ER:   ``{"entities": [{"name", "fields": [...]}], "relationships": [...]}``
  where array fields carry ``{"type": "primitive"|"object"|"array"|"entity"}``
  item descriptors and reference fields carry ``referencedEntityId``.
- XML:  ``{"rootElement", "namespace", "namespacePrefix", "elements":
  [{"name", "type": "element"|"text"|..., "attributes", "children",
  "textContent"}]}``

Decoding is lenient about missing keys (sensible defaults) but rejects values
the tree cannot represent with InvalidImportError. Ids that are missing or
already seen in the same document are replaced by fresh ones, so a decoded
document always has unique node ids. Keys this package does not interpret are
kept in ``Node.extra`` and written back unchanged on export.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from schema_tree.dialects import Dialect, DialectName
from schema_tree.documents import (
    Document,
    ErDocument,
    JsonDocument,
    Relationship,
    RelationshipType,
    RootType,
    XmlDocument,
)
from schema_tree.errors import InvalidImportError, InvalidNodeError
from schema_tree.ids import generate_id, now_ms
from schema_tree.tree.nodes import (
    ArrayItem,
    ArrayItemKind,
    Attribute,
    AttributeType,
    Constraints,
    Node,
    NodeKind,
    PrimitiveType,
)

__all__ = [
    "decode_document",
    "decode_nodes",
    "encode_document",
    "encode_node",
    "export_collection",
    "export_document",
    "parse_json",
    "validate_er_document",
]

_JSON_FIELD_KEYS = frozenset(
    {"id", "key", "type", "required", "defaultValue", "constraints",
     "nestedFields", "arrayItemType"}
)
_ER_FIELD_KEYS = frozenset(
    {"id", "name", "type", "required", "defaultValue", "constraints",
     "nestedFields", "arrayItemType", "referencedEntityId"}
)
_ER_ENTITY_KEYS = frozenset({"id", "name", "fields"})
_XML_ELEMENT_KEYS = frozenset(
    {"id", "name", "type", "required", "attributes", "children", "textContent"}
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_json(text: str) -> Any:
    """Parse ``text`` as JSON, raising InvalidImportError on failure."""
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise InvalidImportError([f"Invalid JSON: {exc}"]) from exc


def _claim_id(raw: Any, seen: set[str]) -> str:
    """Keep ``raw`` as the id unless it is missing or already used."""
    if isinstance(raw, str) and raw and raw not in seen:
        seen.add(raw)
        return raw
    fresh = generate_id()
    seen.add(fresh)
    return fresh


def _extra(data: dict[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidImportError([f"{what} must be an array"])
    return value


def _as_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidImportError([f"{what} must be an object"])
    return value


def _primitive(value: Any, dialect: Dialect, what: str) -> PrimitiveType:
    try:
        primitive = PrimitiveType(value)
    except (TypeError, ValueError):
        primitive = None
    if primitive is None or primitive not in dialect.scalar_types:
        raise InvalidImportError([f"Unsupported {what} type {value!r}"])
    return primitive


def _flag(value: Any) -> bool:
    """Wire booleans: only ``true`` (or the string "true") counts as set."""
    return value is True or value == "true"


def _timestamp(value: Any, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _encode_constraints(constraints: Constraints) -> dict[str, Any]:
    wire = {
        "min": constraints.minimum,
        "max": constraints.maximum,
        "pattern": constraints.pattern,
        "enum": list(constraints.enum) if constraints.enum is not None else None,
    }
    return {k: v for k, v in wire.items() if v is not None}


def _decode_constraints(data: Any) -> Constraints | None:
    if not isinstance(data, dict):
        return None
    errors: list[str] = []
    for key in ("min", "max"):
        bound = data.get(key)
        if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int | float)):
            errors.append(f"Constraint {key!r} must be a number")
    pattern = data.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        errors.append("Constraint 'pattern' must be a string")
    enum = data.get("enum")
    if enum is not None and not isinstance(enum, list):
        errors.append("Constraint 'enum' must be an array")
    if errors:
        raise InvalidImportError(errors)
    return Constraints(
        minimum=data.get("min"),
        maximum=data.get("max"),
        pattern=pattern,
        enum=tuple(enum) if enum is not None else None,
    )


def _scalar_payload(node: Node, wire: dict[str, Any]) -> None:
    if node.default_value is not None:
        wire["defaultValue"] = node.default_value
    if node.constraints is not None:
        wire["constraints"] = _encode_constraints(node.constraints)


def _build(factory: Any, **fields: Any) -> Node:
    try:
        return factory(**fields)
    except InvalidNodeError as exc:
        raise InvalidImportError([str(exc)]) from exc


# ---------------------------------------------------------------------------
# JSON dialect
# ---------------------------------------------------------------------------


def _encode_json_field(node: Node) -> dict[str, Any]:
    wire: dict[str, Any] = dict(node.extra)
    wire.update(id=node.id, key=node.name, required=node.required)
    if node.kind is NodeKind.SCALAR:
        wire["type"] = str(node.primitive)
        _scalar_payload(node, wire)
    elif node.kind is NodeKind.OBJECT:
        wire["type"] = "object"
        wire["nestedFields"] = [_encode_json_field(c) for c in node.children]
    else:
        assert node.item is not None
        wire["type"] = "array"
        if node.item.kind is ArrayItemKind.OBJECT:
            wire["arrayItemType"] = [_encode_json_field(f) for f in node.item.fields]
        else:
            wire["arrayItemType"] = str(node.item.primitive)
    return wire


def _decode_json_field(data: Any, dialect: Dialect, seen: set[str]) -> Node:
    data = _as_dict(data, "Field")
    common = {
        "id": _claim_id(data.get("id"), seen),
        "name": str(data.get("key", data.get("name", ""))),
        "required": _flag(data.get("required")),
        "extra": _extra(data, _JSON_FIELD_KEYS),
    }
    kind = data.get("type", "string")
    if kind == "object":
        children = _as_list(data.get("nestedFields"), "nestedFields")
        return _build(
            Node,
            kind=NodeKind.OBJECT,
            children=tuple(_decode_json_field(c, dialect, seen) for c in children),
            **common,
        )
    if kind == "array":
        raw_item = data.get("arrayItemType")
        if isinstance(raw_item, list):
            item = ArrayItem.of_object(_decode_json_field(f, dialect, seen) for f in raw_item)
        elif raw_item is None:
            item = ArrayItem.of_primitive(dialect.default_item_type)
        elif raw_item == "object":
            item = ArrayItem.of_object()
        else:
            item = ArrayItem.of_primitive(_primitive(raw_item, dialect, "array item"))
        return _build(Node, kind=NodeKind.ARRAY, item=item, **common)
    return _build(
        Node,
        kind=NodeKind.SCALAR,
        primitive=_primitive(kind, dialect, "field"),
        default_value=data.get("defaultValue"),
        constraints=_decode_constraints(data.get("constraints")),
        **common,
    )


# ---------------------------------------------------------------------------
# ER dialect
# ---------------------------------------------------------------------------


def _encode_er_item(item: ArrayItem) -> dict[str, Any]:
    if item.kind is ArrayItemKind.PRIMITIVE:
        return {"type": "primitive", "value": str(item.primitive)}
    if item.kind is ArrayItemKind.OBJECT:
        return {"type": "object", "fields": [_encode_er_field(f) for f in item.fields]}
    if item.kind is ArrayItemKind.ARRAY:
        assert item.item is not None
        return {"type": "array", "itemType": _encode_er_item(item.item)}
    return {"type": "entity", "entityId": item.entity_id}


def _decode_er_item(data: Any, dialect: Dialect, seen: set[str]) -> ArrayItem:
    if isinstance(data, str):
        return ArrayItem.of_primitive(_primitive(data, dialect, "array item"))
    data = _as_dict(data, "arrayItemType")
    kind = data.get("type", "primitive")
    if kind == "primitive":
        value = data.get("value", dialect.default_item_type)
        return ArrayItem.of_primitive(_primitive(value, dialect, "array item"))
    if kind == "object":
        fields = _as_list(data.get("fields"), "arrayItemType.fields")
        return ArrayItem.of_object(_decode_er_field(f, dialect, seen) for f in fields)
    if kind == "array":
        return ArrayItem.of_array(_decode_er_item(data.get("itemType"), dialect, seen))
    if kind == "entity":
        return ArrayItem.of_entity(data.get("entityId"))
    raise InvalidImportError([f"Unsupported array item type {kind!r}"])


def _encode_er_field(node: Node) -> dict[str, Any]:
    wire: dict[str, Any] = dict(node.extra)
    wire.update(id=node.id, name=node.name, required=node.required)
    if node.kind is NodeKind.SCALAR:
        wire["type"] = str(node.primitive)
        _scalar_payload(node, wire)
    elif node.kind is NodeKind.OBJECT:
        wire["type"] = "object"
        wire["nestedFields"] = [_encode_er_field(c) for c in node.children]
    elif node.kind is NodeKind.ARRAY:
        assert node.item is not None
        wire["type"] = "array"
        wire["arrayItemType"] = _encode_er_item(node.item)
    else:
        wire["type"] = "reference"
        if node.reference_id is not None:
            wire["referencedEntityId"] = node.reference_id
    return wire


def _decode_er_field(data: Any, dialect: Dialect, seen: set[str]) -> Node:
    data = _as_dict(data, "Field")
    kind = data.get("type", "string")
    known = _ER_FIELD_KEYS if kind == "reference" else _ER_FIELD_KEYS - {"referencedEntityId"}
    common = {
        "id": _claim_id(data.get("id"), seen),
        "name": str(data.get("name", "")),
        "required": _flag(data.get("required")),
        "extra": _extra(data, known),
    }
    if kind == "object":
        children = _as_list(data.get("nestedFields"), "nestedFields")
        return _build(
            Node,
            kind=NodeKind.OBJECT,
            children=tuple(_decode_er_field(c, dialect, seen) for c in children),
            **common,
        )
    if kind == "array":
        raw_item = data.get("arrayItemType")
        item = (
            ArrayItem.of_primitive(dialect.default_item_type)
            if raw_item is None
            else _decode_er_item(raw_item, dialect, seen)
        )
        return _build(Node, kind=NodeKind.ARRAY, item=item, **common)
    if kind == "reference":
        return _build(
            Node,
            kind=NodeKind.REFERENCE,
            reference_id=data.get("referencedEntityId"),
            **common,
        )
    return _build(
        Node,
        kind=NodeKind.SCALAR,
        primitive=_primitive(kind, dialect, "field"),
        default_value=data.get("defaultValue"),
        constraints=_decode_constraints(data.get("constraints")),
        **common,
    )


def _encode_entity(node: Node) -> dict[str, Any]:
    wire: dict[str, Any] = dict(node.extra)
    wire.update(
        id=node.id,
        name=node.name,
        fields=[_encode_er_field(f) for f in node.children],
    )
    return wire


def _decode_entity(data: Any, dialect: Dialect, seen: set[str]) -> Node:
    data = _as_dict(data, "Entity")
    fields = _as_list(data.get("fields"), "Entity fields")
    return _build(
        Node,
        id=_claim_id(data.get("id"), seen),
        name=str(data.get("name", "")),
        kind=NodeKind.OBJECT,
        children=tuple(_decode_er_field(f, dialect, seen) for f in fields),
        extra=_extra(data, _ER_ENTITY_KEYS),
    )


def _encode_relationship(rel: Relationship) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "id": rel.id,
        "fromEntityId": rel.from_entity_id,
        "toEntityId": rel.to_entity_id,
        "type": str(rel.type),
    }
    optional = {"fromFieldId": rel.from_field_id, "toFieldId": rel.to_field_id, "name": rel.name}
    wire.update({k: v for k, v in optional.items() if v is not None})
    return wire


def _decode_relationship(data: Any, seen: set[str]) -> Relationship:
    data = _as_dict(data, "Relationship")
    try:
        rel_type = RelationshipType(data.get("type", RelationshipType.ONE_TO_MANY))
    except ValueError:
        raise InvalidImportError([f"Unsupported relationship type {data.get('type')!r}"]) from None
    return Relationship(
        id=_claim_id(data.get("id"), seen),
        from_entity_id=data.get("fromEntityId"),
        to_entity_id=data.get("toEntityId"),
        type=rel_type,
        from_field_id=data.get("fromFieldId"),
        to_field_id=data.get("toFieldId"),
        name=data.get("name"),
    )


def validate_er_document(data: Any) -> list[str]:
    """Shallow structural check of an imported ER document.

    Returns:
        Human-readable errors; empty when the document is acceptable.
    """
    if not isinstance(data, dict):
        return ["Schema must be a JSON object"]
    errors: list[str] = []
    if not isinstance(data.get("name"), str) or not data["name"]:
        errors.append("Schema must have a valid name")
    entities = data.get("entities")
    if not isinstance(entities, list):
        errors.append("Schema must have an entities array")
    if not isinstance(data.get("relationships"), list):
        errors.append("Schema must have a relationships array")
    for index, entity in enumerate(entities if isinstance(entities, list) else [], start=1):
        entity = entity if isinstance(entity, dict) else {}
        if not isinstance(entity.get("name"), str) or not entity["name"]:
            errors.append(f"Entity {index} must have a valid name")
        if not isinstance(entity.get("fields"), list):
            errors.append(f"Entity {index} must have a fields array")
    return errors


# ---------------------------------------------------------------------------
# XML dialect
# ---------------------------------------------------------------------------


def _encode_attribute(attr: Attribute) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "id": attr.id,
        "name": attr.name,
        "type": str(attr.type),
        "required": attr.required,
    }
    if attr.default_value is not None:
        wire["defaultValue"] = attr.default_value
    return wire


def _decode_attribute(data: Any, seen: set[str]) -> Attribute:
    data = _as_dict(data, "Attribute")
    try:
        attr_type = AttributeType(data.get("type", AttributeType.STRING))
    except ValueError:
        raise InvalidImportError([f"Unsupported attribute type {data.get('type')!r}"]) from None
    return Attribute(
        id=_claim_id(data.get("id"), seen),
        name=str(data.get("name", "")),
        type=attr_type,
        required=_flag(data.get("required")),
        default_value=data.get("defaultValue"),
    )


def _encode_xml_element(node: Node) -> dict[str, Any]:
    wire: dict[str, Any] = dict(node.extra)
    wire.update(
        id=node.id,
        name=node.name,
        type="element" if node.kind is NodeKind.OBJECT else str(node.primitive),
        required=node.required,
        attributes=[_encode_attribute(a) for a in node.attributes],
    )
    if node.kind is NodeKind.OBJECT:
        wire["children"] = [_encode_xml_element(c) for c in node.children]
    if node.text_content is not None:
        wire["textContent"] = node.text_content
    return wire


def _decode_xml_element(data: Any, dialect: Dialect, seen: set[str]) -> Node:
    data = _as_dict(data, "Element")
    attributes = tuple(
        _decode_attribute(a, seen) for a in _as_list(data.get("attributes"), "attributes")
    )
    common = {
        "id": _claim_id(data.get("id"), seen),
        "name": str(data.get("name", "")),
        "required": _flag(data.get("required")),
        "attributes": attributes,
        "text_content": data.get("textContent"),
        "extra": _extra(data, _XML_ELEMENT_KEYS),
    }
    kind = data.get("type", "element")
    if kind == "element":
        children = _as_list(data.get("children"), "children")
        return _build(
            Node,
            kind=NodeKind.OBJECT,
            children=tuple(_decode_xml_element(c, dialect, seen) for c in children),
            **common,
        )
    return _build(
        Node,
        kind=NodeKind.SCALAR,
        primitive=_primitive(kind, dialect, "element"),
        **common,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_FIELD_ENCODERS = {
    DialectName.JSON: _encode_json_field,
    DialectName.ER: _encode_er_field,
    DialectName.XML: _encode_xml_element,
}
_ROOT_DECODERS = {
    DialectName.JSON: _decode_json_field,
    DialectName.ER: _decode_entity,
    DialectName.XML: _decode_xml_element,
}


def encode_node(node: Node, dialect: Dialect) -> dict[str, Any]:
    """Wire form of a single field/element (not an ER entity)."""
    return _FIELD_ENCODERS[dialect.name](node)


def decode_nodes(
    items: Iterable[Any],
    dialect: Dialect,
    seen: set[str] | None = None,
) -> tuple[Node, ...]:
    """Decode a top-level wire list (fields, elements or entities)."""
    seen = set() if seen is None else seen
    decoder = _ROOT_DECODERS[dialect.name]
    nodes = tuple(decoder(item, dialect, seen) for item in items)
    try:
        for node in nodes:
            dialect.check_root(node)
    except InvalidNodeError as exc:
        raise InvalidImportError([str(exc)]) from exc
    return nodes


def encode_document(document: Document) -> dict[str, Any]:
    """Wire form of a whole document in its dialect's format."""
    wire: dict[str, Any] = {"id": document.id, "name": document.name}
    if document.description is not None:
        wire["description"] = document.description
    if isinstance(document, JsonDocument):
        wire["rootType"] = str(document.root_type)
        wire["fields"] = [_encode_json_field(n) for n in document.nodes]
    elif isinstance(document, XmlDocument):
        wire["rootElement"] = document.root_element
        wire["elements"] = [_encode_xml_element(n) for n in document.nodes]
        if document.namespace is not None:
            wire["namespace"] = document.namespace
        if document.namespace_prefix is not None:
            wire["namespacePrefix"] = document.namespace_prefix
    elif isinstance(document, ErDocument):
        wire["entities"] = [_encode_entity(n) for n in document.nodes]
        wire["relationships"] = [_encode_relationship(r) for r in document.relationships]
    else:
        msg = f"cannot encode document type {type(document).__name__}"
        raise TypeError(msg)
    wire["createdAt"] = document.created_at
    wire["updatedAt"] = document.updated_at
    return wire


def decode_document(data: Any, dialect: Dialect, *, fresh_id: bool = False) -> Document:
    """Build a document of ``dialect`` from its wire form.

    Args:
        data:     Parsed JSON (a dict).
        dialect:  Dialect the document belongs to.
        fresh_id: Assign a new document id and reset both timestamps to now,
                  as done when importing a file as a new document.

    Raises:
        InvalidImportError: ``data`` cannot be represented.
    """
    data = _as_dict(data, "Schema")
    seen: set[str] = set()
    nodes = decode_nodes(_as_list(data.get(dialect.forest_key), dialect.forest_key), dialect, seen)
    now = now_ms()
    common: dict[str, Any] = {
        "id": generate_id() if fresh_id or not data.get("id") else str(data["id"]),
        "name": str(data.get("name") or "Untitled"),
        "description": data.get("description"),
        "nodes": nodes,
        "created_at": now if fresh_id else _timestamp(data.get("createdAt"), now),
        "updated_at": now if fresh_id else _timestamp(data.get("updatedAt"), now),
    }
    if dialect.name is DialectName.JSON:
        try:
            root_type = RootType(data.get("rootType", RootType.OBJECT))
        except ValueError:
            raise InvalidImportError([f"Unsupported rootType {data.get('rootType')!r}"]) from None
        return JsonDocument(root_type=root_type, **common)
    if dialect.name is DialectName.XML:
        return XmlDocument(
            root_element=str(data.get("rootElement") or "root"),
            namespace=data.get("namespace") or None,
            namespace_prefix=data.get("namespacePrefix") or None,
            **common,
        )
    relationship_ids: set[str] = set()
    relationships = tuple(
        _decode_relationship(r, relationship_ids)
        for r in _as_list(data.get("relationships"), "relationships")
    )
    return ErDocument(relationships=relationships, **common)


def export_document(document: Document, indent: int = 2) -> str:
    """Pretty-printed JSON text of ``document``."""
    return json.dumps(encode_document(document), indent=indent, ensure_ascii=False)


def export_collection(documents: Iterable[Document], indent: int = 2) -> str:
    """Pretty-printed JSON bundle of several documents with an export stamp."""
    bundle = {
        "schemas": [encode_document(d) for d in documents],
        "exportedAt": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
    }
    return json.dumps(bundle, indent=indent, ensure_ascii=False)
