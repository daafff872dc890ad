"""Tree Mutator: insert, update, delete and move nodes in a forest.

All operations are pure. They take a forest (tuple of top-level nodes) and
return a new one, copying only the path from the forest down to the edited
sequence; every other subtree is shared with the input. When the target id
does not resolve, or the edit would change nothing, the input forest object
itself is returned, so callers can test ``result is forest`` to detect a
no-op.

Dialect rules (legal kinds, scalar vocabulary, array item policy) are checked
before any node enters the tree. Breaking them raises InvalidNodeError: that
is a caller bug, not a user-facing failure.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from schema_tree.errors import InvalidNodeError
from schema_tree.ids import generate_id
from schema_tree.tree.locator import Attachment, Step, attachment_of, find
from schema_tree.tree.nodes import Attribute, AttributeType, Node, NodeKind

if TYPE_CHECKING:
    from schema_tree.dialects import Dialect

__all__ = [
    "UPDATABLE_FIELDS",
    "Direction",
    "add_attribute",
    "delete",
    "delete_attribute",
    "insert",
    "move",
    "update",
    "update_attribute",
]

Forest = tuple[Node, ...]
SequenceEdit = Callable[[Forest, int], Forest]

UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "kind",
        "required",
        "primitive",
        "default_value",
        "constraints",
        "item",
        "reference_id",
        "text_content",
        "extra",
    }
)

_ATTRIBUTE_FIELDS: frozenset[str] = frozenset(
    {"name", "type", "required", "default_value"}
)


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"


# ---------------------------------------------------------------------------
# Path rebuilding
# ---------------------------------------------------------------------------


def _sequence_of(node: Node, attachment: Attachment) -> Forest:
    if attachment is Attachment.CHILDREN:
        return node.children
    assert node.item is not None
    fields = node.item.shape_fields
    assert fields is not None
    return fields


def _with_sequence(node: Node, attachment: Attachment, sequence: Forest) -> Node:
    if attachment is Attachment.CHILDREN:
        return replace(node, children=sequence)
    assert node.item is not None
    return replace(node, item=node.item.with_shape_fields(sequence))


def _rebuild(forest: Forest, address: tuple[Step, ...], edit: SequenceEdit) -> Forest:
    """Apply ``edit`` to the sequence addressed by ``address``.

    ``address[-1].index`` is handed to ``edit`` together with the sequence
    that contains it; every ancestor on the way is copied with its new
    sequence, siblings off the path are reused as-is.
    """
    head, rest = address[0], address[1:]
    if not rest:
        return edit(forest, head.index)
    node = forest[head.index]
    attachment = rest[0].attachment
    inner = _rebuild(_sequence_of(node, attachment), rest, edit)
    return _replace_at(forest, head.index, _with_sequence(node, attachment, inner))


def _replace_at(sequence: Forest, index: int, node: Node) -> Forest:
    return (*sequence[:index], node, *sequence[index + 1 :])


# ---------------------------------------------------------------------------
# Node operations
# ---------------------------------------------------------------------------


def insert(
    forest: Iterable[Node],
    parent_id: str | None,
    node: Node,
    dialect: Dialect,
) -> tuple[Forest, str | None]:
    """Append ``node`` under ``parent_id`` (or at the top level when None).

    The whole supplied subtree is re-identified, so the same node can be
    inserted repeatedly without breaking id uniqueness.

    Returns:
        ``(new_forest, new_id)``; ``(forest, None)`` when the parent does not
        exist or cannot host children (scalar, reference, or an array whose
        item type is not an object shape).
    """
    forest = tuple(forest)
    fresh = node.with_fresh_ids()
    if parent_id is None:
        dialect.check_root(fresh)
        return (*forest, fresh), fresh.id

    location = find(forest, parent_id)
    if location is None:
        return forest, None
    hosted = attachment_of(location.node)
    if hosted is None:
        return forest, None
    dialect.check_node(fresh)
    attachment, sequence = hosted

    def _append(siblings: Forest, index: int) -> Forest:
        parent = siblings[index]
        return _replace_at(
            siblings, index, _with_sequence(parent, attachment, (*sequence, fresh))
        )

    return _rebuild(forest, location.address, _append), fresh.id


def update(
    forest: Iterable[Node],
    node_id: str,
    dialect: Dialect,
    **changes: Any,
) -> Forest:
    """Merge ``changes`` into the node ``node_id``.

    A change of ``kind`` first resets every kind-specific field to the new
    kind's defaults, then the remaining changes are applied on top. A new
    ``item`` is treated as a fresh subtree and re-identified.

    Raises:
        InvalidNodeError: ``changes`` names a field that cannot be updated
            (``id``, ``children``, ``attributes``) or produces a node the
            dialect does not allow.
    """
    forest = tuple(forest)
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        msg = f"cannot update node field(s): {', '.join(sorted(unknown))}"
        raise InvalidNodeError(msg)
    location = find(forest, node_id)
    if location is None:
        return forest
    current = location.node

    merged = dict(changes)
    if "kind" in merged and NodeKind(merged["kind"]) is not current.kind:
        merged = {**dialect.default_payload(NodeKind(merged["kind"])), **merged}
    if merged.get("item") is not None:
        merged["item"] = merged["item"].with_fresh_ids()
    updated = replace(current, **merged)
    if updated == current:
        return forest
    if location.parent is None:
        dialect.check_root(updated)
    else:
        dialect.check_node(updated)
    return _rebuild(forest, location.address, lambda seq, i: _replace_at(seq, i, updated))


def delete(forest: Iterable[Node], node_id: str) -> tuple[Forest, Node | None]:
    """Remove ``node_id`` and its whole subtree.

    Returns:
        ``(new_forest, removed_node)``; ``(forest, None)`` if not found.
    """
    forest = tuple(forest)
    location = find(forest, node_id)
    if location is None:
        return forest, None
    new_forest = _rebuild(
        forest, location.address, lambda seq, i: (*seq[:i], *seq[i + 1 :])
    )
    return new_forest, location.node


def move(forest: Iterable[Node], node_id: str, direction: Direction | str) -> Forest:
    """Swap ``node_id`` with its previous (up) or next (down) sibling.

    Moves never leave the owning sequence; at either end they are no-ops.
    """
    forest = tuple(forest)
    direction = Direction(direction)
    location = find(forest, node_id)
    if location is None:
        return forest
    target = location.index + (-1 if direction is Direction.UP else 1)
    if not 0 <= target < len(location.siblings):
        return forest

    def _swap(siblings: Forest, index: int) -> Forest:
        reordered = list(siblings)
        reordered[index], reordered[target] = reordered[target], reordered[index]
        return tuple(reordered)

    return _rebuild(forest, location.address, _swap)


# ---------------------------------------------------------------------------
# Attribute operations (XML)
# ---------------------------------------------------------------------------


def _edit_attributes(
    forest: Forest,
    element_id: str,
    edit: Callable[[tuple[Attribute, ...]], tuple[Attribute, ...]],
) -> Forest:
    location = find(forest, element_id)
    if location is None:
        return forest
    element = location.node
    attributes = edit(element.attributes)
    if attributes == element.attributes:
        return forest
    updated = replace(element, attributes=attributes)
    return _rebuild(forest, location.address, lambda seq, i: _replace_at(seq, i, updated))


def add_attribute(
    forest: Iterable[Node],
    element_id: str,
    attribute: Attribute,
    dialect: Dialect,
) -> tuple[Forest, str | None]:
    """Append ``attribute`` (with a fresh id) to the element ``element_id``."""
    if not dialect.supports_attributes:
        msg = f"{dialect.name} dialect does not support attributes"
        raise InvalidNodeError(msg)
    forest = tuple(forest)
    fresh = replace(attribute, id=generate_id())
    result = _edit_attributes(forest, element_id, lambda attrs: (*attrs, fresh))
    if result is forest:
        return forest, None
    return result, fresh.id


def update_attribute(
    forest: Iterable[Node],
    element_id: str,
    attribute_id: str,
    **changes: Any,
) -> Forest:
    unknown = set(changes) - _ATTRIBUTE_FIELDS
    if unknown:
        msg = f"cannot update attribute field(s): {', '.join(sorted(unknown))}"
        raise InvalidNodeError(msg)
    if "type" in changes:
        changes["type"] = AttributeType(changes["type"])

    def _merge(attrs: tuple[Attribute, ...]) -> tuple[Attribute, ...]:
        return tuple(replace(a, **changes) if a.id == attribute_id else a for a in attrs)

    return _edit_attributes(tuple(forest), element_id, _merge)


def delete_attribute(
    forest: Iterable[Node],
    element_id: str,
    attribute_id: str,
) -> Forest:
    def _drop(attrs: tuple[Attribute, ...]) -> tuple[Attribute, ...]:
        return tuple(a for a in attrs if a.id != attribute_id)

    return _edit_attributes(tuple(forest), element_id, _drop)
