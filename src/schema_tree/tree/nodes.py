"""Node dataclass and its kind/payload vocabulary.

A Node is one field or element definition in a schema tree. Exactly one
NodeKind is active per node and the payload fields belonging to the other
kinds are empty (checked in ``__post_init__``). Nodes are frozen: every edit
builds new nodes and shares the untouched subtrees with the previous tree,
which is what lets the history keep whole-tree snapshots cheaply.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from typing import Any

from schema_tree.errors import InvalidNodeError
from schema_tree.ids import generate_id

__all__ = [
    "ArrayItem",
    "ArrayItemKind",
    "Attribute",
    "AttributeType",
    "Constraints",
    "Node",
    "NodeKind",
    "PrimitiveType",
]


class NodeKind(StrEnum):
    """The four mutually exclusive node variants.

    - SCALAR    -> "scalar"    : a leaf with a primitive type
    - OBJECT    -> "object"    : ordered child nodes (XML: an element)
    - ARRAY     -> "array"     : an item-type specification
    - REFERENCE -> "reference" : id of another top-level entity (ER only)
    """

    SCALAR = auto()
    OBJECT = auto()
    ARRAY = auto()
    REFERENCE = auto()


class PrimitiveType(StrEnum):
    """Leaf type tags. Each dialect accepts a subset of these."""

    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    DATE = auto()
    NULL = auto()
    UNDEFINED = auto()
    TEXT = auto()


class ArrayItemKind(StrEnum):
    """What an array holds: a primitive, an object shape, an array, an entity."""

    PRIMITIVE = auto()
    OBJECT = auto()
    ARRAY = auto()
    ENTITY = auto()


class AttributeType(StrEnum):
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()


@dataclass(frozen=True, slots=True)
class Constraints:
    """Value constraints carried with a scalar. Never enforced."""

    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None
    enum: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))


@dataclass(frozen=True, slots=True)
class Attribute:
    """An XML attribute declared on an element."""

    id: str
    name: str
    type: AttributeType = AttributeType.STRING
    required: bool = False
    default_value: str | float | bool | None = None

    @classmethod
    def create(
        cls,
        name: str,
        type: AttributeType = AttributeType.STRING,  # noqa: A002
        *,
        required: bool = False,
        default_value: str | float | bool | None = None,
    ) -> Attribute:
        return cls(
            id=generate_id(),
            name=name,
            type=AttributeType(type),
            required=required,
            default_value=default_value,
        )


@dataclass(frozen=True, slots=True)
class ArrayItem:
    """Item-type specification of an ARRAY node.

    Attributes:
        kind:      Which variant is active (see ArrayItemKind).
        primitive: Element type for PRIMITIVE items.
        fields:    Ordered object shape for OBJECT items. Each field is a
                   full Node with its own id.
        item:      Inner item type for ARRAY items (array of arrays).
        entity_id: Referenced top-level entity for ENTITY items.
    """

    kind: ArrayItemKind
    primitive: PrimitiveType | None = None
    fields: tuple[Node, ...] = ()
    item: ArrayItem | None = None
    entity_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        kind = self.kind
        if (kind is ArrayItemKind.PRIMITIVE) != (self.primitive is not None):
            msg = f"{kind} array item must carry a primitive only when PRIMITIVE"
            raise InvalidNodeError(msg)
        if kind is not ArrayItemKind.OBJECT and self.fields:
            msg = f"{kind} array item cannot carry an object shape"
            raise InvalidNodeError(msg)
        if (kind is ArrayItemKind.ARRAY) != (self.item is not None):
            msg = f"{kind} array item must carry an inner item only when ARRAY"
            raise InvalidNodeError(msg)
        if kind is not ArrayItemKind.ENTITY and self.entity_id is not None:
            msg = f"{kind} array item cannot reference an entity"
            raise InvalidNodeError(msg)

    @classmethod
    def of_primitive(cls, primitive: PrimitiveType = PrimitiveType.STRING) -> ArrayItem:
        return cls(kind=ArrayItemKind.PRIMITIVE, primitive=PrimitiveType(primitive))

    @classmethod
    def of_object(cls, fields: Iterable[Node] = ()) -> ArrayItem:
        return cls(kind=ArrayItemKind.OBJECT, fields=tuple(fields))

    @classmethod
    def of_array(cls, item: ArrayItem) -> ArrayItem:
        return cls(kind=ArrayItemKind.ARRAY, item=item)

    @classmethod
    def of_entity(cls, entity_id: str | None = None) -> ArrayItem:
        return cls(kind=ArrayItemKind.ENTITY, entity_id=entity_id)

    def innermost(self) -> ArrayItem:
        """Follow nested ARRAY items down to the first non-array item."""
        current = self
        while current.item is not None:
            current = current.item
        return current

    @property
    def shape_fields(self) -> tuple[Node, ...] | None:
        """The object shape this array ultimately repeats, or None."""
        inner = self.innermost()
        if inner.kind is ArrayItemKind.OBJECT:
            return inner.fields
        return None

    def with_shape_fields(self, fields: tuple[Node, ...]) -> ArrayItem:
        """Return a copy whose innermost object shape holds ``fields``."""
        if self.kind is ArrayItemKind.ARRAY:
            assert self.item is not None
            return replace(self, item=self.item.with_shape_fields(fields))
        if self.kind is not ArrayItemKind.OBJECT:
            msg = f"{self.kind} array item has no object shape"
            raise InvalidNodeError(msg)
        return replace(self, fields=fields)

    def with_fresh_ids(self) -> ArrayItem:
        if self.kind is ArrayItemKind.OBJECT:
            return replace(self, fields=tuple(f.with_fresh_ids() for f in self.fields))
        if self.kind is ArrayItemKind.ARRAY:
            assert self.item is not None
            return replace(self, item=self.item.with_fresh_ids())
        return self


@dataclass(frozen=True, slots=True)
class Node:
    """One field/element definition in a schema tree.

    Attributes:
        id:            Opaque id, unique across the whole document and
                       never changed once assigned.
        name:          JSON key, ER field/entity name or XML tag name.
        kind:          Active variant (see NodeKind).
        required:      Whether the field must be present. Independent of kind.
        primitive:     Leaf type of SCALAR nodes; None for every other kind.
        default_value: Optional example/default value of SCALAR nodes.
        constraints:   Optional SCALAR constraints (carried, not enforced).
        children:      Ordered children of OBJECT nodes.
        item:          Item type of ARRAY nodes.
        reference_id:  Target entity of REFERENCE nodes (may be unset).
        attributes:    Ordered XML attributes.
        text_content:  Literal text of XML text leaves.
        extra:         Wire keys this package does not interpret (entity
                       canvas position, XML occurrence bounds). Carried
                       through import/export unchanged.
    """

    id: str
    name: str
    kind: NodeKind
    required: bool = False
    primitive: PrimitiveType | None = None
    default_value: Any = None
    constraints: Constraints | None = None
    children: tuple[Node, ...] = ()
    item: ArrayItem | None = None
    reference_id: str | None = None
    attributes: tuple[Attribute, ...] = ()
    text_content: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", NodeKind(self.kind))
        if self.primitive is not None:
            object.__setattr__(self, "primitive", PrimitiveType(self.primitive))
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "attributes", tuple(self.attributes))
        kind = self.kind
        if (kind is NodeKind.SCALAR) != (self.primitive is not None):
            msg = f"{kind} node {self.name!r}: primitive is only valid on scalars"
            raise InvalidNodeError(msg)
        if kind is not NodeKind.SCALAR and (
            self.default_value is not None or self.constraints is not None
        ):
            msg = f"{kind} node {self.name!r}: default/constraints need a scalar"
            raise InvalidNodeError(msg)
        if kind is not NodeKind.OBJECT and self.children:
            msg = f"{kind} node {self.name!r} cannot have children"
            raise InvalidNodeError(msg)
        if (kind is NodeKind.ARRAY) != (self.item is not None):
            msg = f"{kind} node {self.name!r}: item type is only valid on arrays"
            raise InvalidNodeError(msg)
        if kind is not NodeKind.REFERENCE and self.reference_id is not None:
            msg = f"{kind} node {self.name!r} cannot reference an entity"
            raise InvalidNodeError(msg)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def scalar(
        cls,
        name: str,
        primitive: PrimitiveType = PrimitiveType.STRING,
        *,
        required: bool = False,
        default_value: Any = None,
        constraints: Constraints | None = None,
        attributes: Iterable[Attribute] = (),
        text_content: str | None = None,
    ) -> Node:
        return cls(
            id=generate_id(),
            name=name,
            kind=NodeKind.SCALAR,
            required=required,
            primitive=PrimitiveType(primitive),
            default_value=default_value,
            constraints=constraints,
            attributes=tuple(attributes),
            text_content=text_content,
        )

    @classmethod
    def object(
        cls,
        name: str,
        children: Iterable[Node] = (),
        *,
        required: bool = False,
        attributes: Iterable[Attribute] = (),
    ) -> Node:
        return cls(
            id=generate_id(),
            name=name,
            kind=NodeKind.OBJECT,
            required=required,
            children=tuple(children),
            attributes=tuple(attributes),
        )

    @classmethod
    def array(
        cls,
        name: str,
        item: ArrayItem | None = None,
        *,
        required: bool = False,
    ) -> Node:
        return cls(
            id=generate_id(),
            name=name,
            kind=NodeKind.ARRAY,
            required=required,
            item=item if item is not None else ArrayItem.of_primitive(),
        )

    @classmethod
    def reference(
        cls,
        name: str,
        reference_id: str | None = None,
        *,
        required: bool = False,
    ) -> Node:
        return cls(
            id=generate_id(),
            name=name,
            kind=NodeKind.REFERENCE,
            required=required,
            reference_id=reference_id,
        )

    # ------------------------------------------------------------------
    # Derived copies
    # ------------------------------------------------------------------

    def with_fresh_ids(self) -> Node:
        """Copy of this subtree where every node and attribute gets a new id."""
        return replace(
            self,
            id=generate_id(),
            children=tuple(child.with_fresh_ids() for child in self.children),
            item=self.item.with_fresh_ids() if self.item is not None else None,
            attributes=tuple(replace(a, id=generate_id()) for a in self.attributes),
        )
