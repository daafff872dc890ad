"""Tests for the Tree Locator: find, iter_nodes, collect_ids, contains."""

from __future__ import annotations

import pytest

from schema_tree.tree.locator import (
    Attachment,
    attachment_of,
    collect_ids,
    contains,
    find,
    iter_nodes,
)
from schema_tree.tree.nodes import ArrayItem, Node


@pytest.fixture
def forest() -> tuple[Node, ...]:
    street = Node.scalar("street")
    return (
        Node.scalar("id"),
        Node.object(
            "user",
            [
                Node.scalar("name"),
                Node.array("addresses", ArrayItem.of_object([street])),
                Node.array("matrix", ArrayItem.of_array(ArrayItem.of_object([Node.scalar("cell")]))),
            ],
        ),
        Node.array("tags"),
    )


class TestFind:
    def test_top_level(self, forest: tuple[Node, ...]) -> None:
        location = find(forest, forest[2].id)
        assert location is not None
        assert location.node is forest[2]
        assert location.parent is None
        assert location.index == 2
        assert location.siblings == forest
        assert location.attachment is Attachment.ROOT
        assert location.depth == 0

    def test_object_child(self, forest: tuple[Node, ...]) -> None:
        user = forest[1]
        location = find(forest, user.children[0].id)
        assert location is not None
        assert location.parent is user
        assert location.siblings is user.children
        assert location.attachment is Attachment.CHILDREN
        assert [s.index for s in location.address] == [1, 0]

    def test_array_item_shape_field(self, forest: tuple[Node, ...]) -> None:
        addresses = forest[1].children[1]
        street = addresses.item.fields[0]  # type: ignore[union-attr]
        location = find(forest, street.id)
        assert location is not None
        assert location.node is street
        assert location.parent is addresses
        assert location.attachment is Attachment.ITEM_SHAPE
        assert location.depth == 2

    def test_nested_array_shape(self, forest: tuple[Node, ...]) -> None:
        matrix = forest[1].children[2]
        cell = matrix.item.shape_fields[0]  # type: ignore[union-attr,index]
        location = find(forest, cell.id)
        assert location is not None
        assert location.parent is matrix

    def test_unknown_id(self, forest: tuple[Node, ...]) -> None:
        assert find(forest, "missing") is None

    def test_empty_forest(self) -> None:
        assert find((), "anything") is None

    def test_first_match_wins_on_duplicate_ids(self) -> None:
        first = Node(id="dup", name="first", kind="scalar", primitive="string")  # type: ignore[arg-type]
        second = Node(id="dup", name="second", kind="scalar", primitive="string")  # type: ignore[arg-type]
        location = find((Node.object("o", [first]), second), "dup")
        assert location is not None
        assert location.node.name == "first"


class TestAttachmentOf:
    def test_object(self) -> None:
        node = Node.object("o")
        assert attachment_of(node) == (Attachment.CHILDREN, ())

    def test_array_with_object_shape(self) -> None:
        node = Node.array("a", ArrayItem.of_object())
        assert attachment_of(node) == (Attachment.ITEM_SHAPE, ())

    @pytest.mark.parametrize(
        "node",
        [Node.scalar("s"), Node.reference("r"), Node.array("a"), Node.array("e", ArrayItem.of_entity())],
    )
    def test_cannot_host(self, node: Node) -> None:
        assert attachment_of(node) is None


class TestTraversal:
    def test_iter_nodes_is_preorder(self, forest: tuple[Node, ...]) -> None:
        names = [n.name for n in iter_nodes(forest)]
        assert names == ["id", "user", "name", "addresses", "street", "matrix", "cell", "tags"]

    def test_collect_ids_counts_every_node(self, forest: tuple[Node, ...]) -> None:
        ids = collect_ids(forest)
        assert len(ids) == 8
        assert len(set(ids)) == 8

    def test_contains(self, forest: tuple[Node, ...]) -> None:
        assert contains(forest, forest[1].children[0].id)
        assert not contains(forest, "missing")
