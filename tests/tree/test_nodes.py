"""Tests for the Node model: enums, factories and kind/payload exclusivity.

Verifies:
- StrEnum members carry the lowercase wire values
- Factory constructors give fresh ids and kind-consistent payloads
- __post_init__ rejects payloads that do not belong to the node's kind
- with_fresh_ids re-identifies a whole subtree, array item shapes included
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from schema_tree.errors import InvalidNodeError
from schema_tree.tree.locator import collect_ids
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


class TestEnums:
    def test_node_kind_values(self) -> None:
        assert [str(k) for k in NodeKind] == ["scalar", "object", "array", "reference"]

    def test_primitive_values(self) -> None:
        assert PrimitiveType.UNDEFINED == "undefined"
        assert PrimitiveType.TEXT == "text"

    def test_array_item_kind_values(self) -> None:
        assert {str(k) for k in ArrayItemKind} == {"primitive", "object", "array", "entity"}

    def test_members_are_str_instances(self) -> None:
        for member in (*NodeKind, *PrimitiveType, *AttributeType):
            assert isinstance(member, str)


class TestFactories:
    def test_scalar_defaults_to_string(self) -> None:
        node = Node.scalar("title")
        assert node.kind is NodeKind.SCALAR
        assert node.primitive is PrimitiveType.STRING
        assert node.children == ()
        assert node.item is None

    def test_object_holds_children_in_order(self) -> None:
        a, b = Node.scalar("a"), Node.scalar("b")
        node = Node.object("parent", [a, b])
        assert node.children == (a, b)
        assert node.primitive is None

    def test_array_defaults_to_string_items(self) -> None:
        node = Node.array("tags")
        assert node.item == ArrayItem.of_primitive(PrimitiveType.STRING)

    def test_reference_may_be_unset(self) -> None:
        node = Node.reference("owner")
        assert node.kind is NodeKind.REFERENCE
        assert node.reference_id is None

    def test_every_factory_call_gets_a_new_id(self) -> None:
        ids = {Node.scalar("x").id for _ in range(50)}
        assert len(ids) == 50

    def test_id_format(self) -> None:
        stamp, _, suffix = Node.scalar("x").id.partition("-")
        assert stamp.isdigit()
        assert len(suffix) == 9
        assert suffix.isalnum() and suffix == suffix.lower()

    def test_attribute_create_coerces_type(self) -> None:
        attr = Attribute.create("id", "number", required=True)
        assert attr.type is AttributeType.NUMBER
        assert attr.required is True

    def test_string_kind_is_coerced(self) -> None:
        node = Node(id="n1", name="x", kind="scalar", primitive="number")  # type: ignore[arg-type]
        assert node.kind is NodeKind.SCALAR
        assert node.primitive is PrimitiveType.NUMBER

    def test_constraints_enum_becomes_tuple(self) -> None:
        constraints = Constraints(enum=["a", "b"])  # type: ignore[arg-type]
        assert constraints.enum == ("a", "b")


class TestExclusivity:
    """Exactly one kind's payload may be populated."""

    def test_object_cannot_have_primitive(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.OBJECT, primitive=PrimitiveType.STRING)

    def test_scalar_requires_primitive(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.SCALAR)

    def test_scalar_cannot_have_children(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(
                id="n",
                name="x",
                kind=NodeKind.SCALAR,
                primitive=PrimitiveType.STRING,
                children=(Node.scalar("c"),),
            )

    def test_array_requires_item(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.ARRAY)

    def test_object_cannot_have_item(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.OBJECT, item=ArrayItem.of_primitive())

    def test_default_value_needs_scalar(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.OBJECT, default_value=3)

    def test_reference_id_needs_reference(self) -> None:
        with pytest.raises(InvalidNodeError):
            Node(id="n", name="x", kind=NodeKind.OBJECT, reference_id="e1")

    def test_nodes_are_frozen(self) -> None:
        node = Node.scalar("x")
        with pytest.raises(FrozenInstanceError):
            node.name = "y"  # type: ignore[misc]


class TestArrayItem:
    def test_primitive_item_requires_primitive(self) -> None:
        with pytest.raises(InvalidNodeError):
            ArrayItem(kind=ArrayItemKind.PRIMITIVE)

    def test_object_item_cannot_carry_primitive(self) -> None:
        with pytest.raises(InvalidNodeError):
            ArrayItem(kind=ArrayItemKind.OBJECT, primitive=PrimitiveType.STRING)

    def test_array_item_requires_inner_item(self) -> None:
        with pytest.raises(InvalidNodeError):
            ArrayItem(kind=ArrayItemKind.ARRAY)

    def test_only_entity_items_reference(self) -> None:
        with pytest.raises(InvalidNodeError):
            ArrayItem(kind=ArrayItemKind.OBJECT, entity_id="e1")

    def test_innermost_follows_nested_arrays(self) -> None:
        shape = ArrayItem.of_object([Node.scalar("x")])
        nested = ArrayItem.of_array(ArrayItem.of_array(shape))
        assert nested.innermost() is shape
        assert nested.shape_fields == shape.fields

    def test_shape_fields_is_none_for_primitive(self) -> None:
        assert ArrayItem.of_primitive().shape_fields is None

    def test_with_shape_fields_rewrites_innermost(self) -> None:
        nested = ArrayItem.of_array(ArrayItem.of_object())
        field = Node.scalar("x")
        updated = nested.with_shape_fields((field,))
        assert updated.kind is ArrayItemKind.ARRAY
        assert updated.shape_fields == (field,)

    def test_with_shape_fields_rejects_non_object(self) -> None:
        with pytest.raises(InvalidNodeError):
            ArrayItem.of_entity("e1").with_shape_fields(())


class TestWithFreshIds:
    def test_reids_every_node_in_subtree(self) -> None:
        shape_field = Node.scalar("street")
        tree = Node.object(
            "user",
            [
                Node.scalar("name"),
                Node.array("addresses", ArrayItem.of_array(ArrayItem.of_object([shape_field]))),
            ],
            attributes=[Attribute.create("id")],
        )
        copy = tree.with_fresh_ids()
        before = collect_ids((tree,))
        after = collect_ids((copy,))
        assert len(after) == len(before) == 4
        assert set(before).isdisjoint(after)
        assert copy.attributes[0].id != tree.attributes[0].id

    def test_keeps_names_and_structure(self) -> None:
        tree = Node.object("user", [Node.scalar("name", PrimitiveType.NUMBER)])
        copy = tree.with_fresh_ids()
        assert copy.name == "user"
        assert copy.children[0].name == "name"
        assert copy.children[0].primitive is PrimitiveType.NUMBER
