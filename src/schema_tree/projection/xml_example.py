"""XmlProjector: render example XML text from an XML-dialect tree.

Elements render as an opening tag with attribute values followed by nested
child tags (one indent unit per depth), or as a self-closing tag when they
have no children. Text leaves render inline with their ``text_content`` or a
placeholder. Attribute values and text are XML-escaped.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from xml.sax.saxutils import escape

from schema_tree.documents import XmlDocument
from schema_tree.projection.json_example import format_scalar
from schema_tree.tree.nodes import Attribute, AttributeType, Node, PrimitiveType

__all__ = [
    "ATTRIBUTE_EXAMPLES",
    "TEXT_PLACEHOLDER",
    "XML_DECLARATION",
    "XmlProjector",
]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
TEXT_PLACEHOLDER = "text content"

ATTRIBUTE_EXAMPLES: Mapping[AttributeType, str] = MappingProxyType(
    {
        AttributeType.STRING: "value",
        AttributeType.NUMBER: "0",
        AttributeType.BOOLEAN: "true",
    }
)

_ATTR_ENTITIES = {'"': "&quot;"}


@dataclass
class XmlProjector:
    """Renders XML elements and documents.

    Attributes:
        indent: Indentation unit repeated once per nesting depth.
    """

    indent: str = "  "

    def render_document(self, document: XmlDocument) -> str:
        """Full document: declaration, root tag (with xmlns), elements."""
        root = document.root_element or "root"
        namespace = ""
        if document.namespace:
            prefix = f":{document.namespace_prefix}" if document.namespace_prefix else ""
            namespace = f' xmlns{prefix}="{escape(document.namespace, _ATTR_ENTITIES)}"'
        lines = [XML_DECLARATION, f"<{root}{namespace}>"]
        lines.extend(self.render_element(node, depth=1) for node in document.nodes)
        lines.append(f"</{root}>")
        return "\n".join(lines)

    def render_element(self, node: Node, depth: int = 0) -> str:
        pad = self.indent * depth
        attrs = self._render_attributes(node.attributes)
        if node.primitive is PrimitiveType.TEXT:
            text = escape(node.text_content or TEXT_PLACEHOLDER)
            return f"{pad}<{node.name}{attrs}>{text}</{node.name}>"
        if node.children:
            inner = "\n".join(self.render_element(c, depth + 1) for c in node.children)
            return f"{pad}<{node.name}{attrs}>\n{inner}\n{pad}</{node.name}>"
        return f"{pad}<{node.name}{attrs} />"

    def _render_attributes(self, attributes: tuple[Attribute, ...]) -> str:
        rendered = [
            f'{attr.name}="{escape(self._attribute_value(attr), _ATTR_ENTITIES)}"'
            for attr in attributes
        ]
        return "".join(f" {item}" for item in rendered)

    @staticmethod
    def _attribute_value(attr: Attribute) -> str:
        if attr.default_value is None:
            return ATTRIBUTE_EXAMPLES[attr.type]
        return format_scalar(attr.default_value)
