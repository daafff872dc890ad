"""Tree Locator: find a node by id anywhere in a forest.

The search is a depth-first, pre-order walk that descends into OBJECT
children and into the object shape of ARRAY items (through nested array
items). The first match wins; ids are unique per document so at most one
node can match.

Besides the node, a ``Location`` records the sibling tuple holding it and
the ``address`` of that tuple: one ``Step`` per level, from the top-level
forest down. The mutator rebuilds the path from that address by index, so
an edit never needs a second search.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum, auto

from schema_tree.tree.nodes import Node, NodeKind

__all__ = [
    "Attachment",
    "Location",
    "Step",
    "attachment_of",
    "collect_ids",
    "contains",
    "find",
    "iter_nodes",
]


class Attachment(StrEnum):
    """Which sequence of its parent a node lives in.

    - ROOT       -> the document's top-level forest
    - CHILDREN   -> an OBJECT node's children
    - ITEM_SHAPE -> the object shape repeated by an ARRAY node
    """

    ROOT = auto()
    CHILDREN = auto()
    ITEM_SHAPE = auto()


@dataclass(frozen=True, slots=True)
class Step:
    attachment: Attachment
    index: int


@dataclass(frozen=True, slots=True)
class Location:
    """Result of a successful ``find``.

    Attributes:
        node:     The node with the requested id.
        siblings: The exact tuple the node lives in (``siblings[index] is node``).
        index:    Position of the node within ``siblings``.
        parent:   Node owning ``siblings``; None for top-level nodes.
        address:  Steps from the forest down to the node, last step included.
    """

    node: Node
    siblings: tuple[Node, ...]
    index: int
    parent: Node | None
    address: tuple[Step, ...]

    @property
    def attachment(self) -> Attachment:
        return self.address[-1].attachment

    @property
    def depth(self) -> int:
        return len(self.address) - 1


def attachment_of(node: Node) -> tuple[Attachment, tuple[Node, ...]] | None:
    """The sequence ``node`` can host children in, if any.

    OBJECT nodes host in ``children``; ARRAY nodes whose (innermost) item is
    an object shape host in that shape. Everything else hosts nothing.
    """
    if node.kind is NodeKind.OBJECT:
        return Attachment.CHILDREN, node.children
    if node.kind is NodeKind.ARRAY and node.item is not None:
        fields = node.item.shape_fields
        if fields is not None:
            return Attachment.ITEM_SHAPE, fields
    return None


def find(forest: Iterable[Node], node_id: str) -> Location | None:
    """Locate ``node_id`` in ``forest``. O(n) in the total node count."""
    return _find_in(tuple(forest), node_id, None, (), Attachment.ROOT)


def _find_in(
    siblings: tuple[Node, ...],
    node_id: str,
    parent: Node | None,
    prefix: tuple[Step, ...],
    attachment: Attachment,
) -> Location | None:
    for index, node in enumerate(siblings):
        address = (*prefix, Step(attachment, index))
        if node.id == node_id:
            return Location(node, siblings, index, parent, address)
        hosted = attachment_of(node)
        if hosted is not None:
            found = _find_in(hosted[1], node_id, node, address, hosted[0])
            if found is not None:
                return found
    return None


def iter_nodes(forest: Iterable[Node]) -> Iterator[Node]:
    """Yield every node of the forest depth-first, in serialization order."""
    for node in forest:
        yield node
        hosted = attachment_of(node)
        if hosted is not None:
            yield from iter_nodes(hosted[1])


def collect_ids(forest: Iterable[Node]) -> list[str]:
    """All node ids in traversal order. Duplicates are kept, not merged."""
    return [node.id for node in iter_nodes(forest)]


def contains(forest: Iterable[Node], node_id: str) -> bool:
    return find(forest, node_id) is not None
