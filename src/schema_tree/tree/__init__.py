"""Tree subpackage: the generic schema tree engine.

Re-exports the public API for the tree module:
- Node, ArrayItem, Attribute and their enums: the node model
- find / Location: id lookup anywhere in a forest
- insert / update / delete / move: pure forest mutations
"""

from schema_tree.tree.locator import Attachment, Location, collect_ids, find, iter_nodes
from schema_tree.tree.mutator import Direction, delete, insert, move, update
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
    "ArrayItem",
    "ArrayItemKind",
    "Attachment",
    "Attribute",
    "AttributeType",
    "Constraints",
    "Direction",
    "Location",
    "Node",
    "NodeKind",
    "PrimitiveType",
    "collect_ids",
    "delete",
    "find",
    "insert",
    "iter_nodes",
    "move",
    "update",
]
