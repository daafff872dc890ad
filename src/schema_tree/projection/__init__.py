"""Projection subpackage: deterministic example output from schema trees.

- JsonProjector: example JSON values for the JSON and ER dialects
- XmlProjector: example XML text for the XML dialect
- project / project_node / project_element: dialect-aware entry points
"""

from schema_tree.projection.json_example import JsonProjector, JsonValue, coerce_default
from schema_tree.projection.projector import project, project_element, project_node
from schema_tree.projection.xml_example import XmlProjector

__all__ = [
    "JsonProjector",
    "JsonValue",
    "XmlProjector",
    "coerce_default",
    "project",
    "project_element",
    "project_node",
]
