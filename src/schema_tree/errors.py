"""Exception hierarchy for schema-tree.

Only programming errors and rejected imports raise. A mutation aimed at an
id that no longer exists is a silent no-op, and storage failures are logged
by the collection instead of propagating.
"""

from __future__ import annotations

__all__ = [
    "DocumentNotFoundError",
    "InvalidImportError",
    "InvalidNodeError",
    "SchemaTreeError",
    "UnsupportedOperationError",
]


class SchemaTreeError(Exception):
    """Base class for every error raised by schema-tree."""


class InvalidNodeError(SchemaTreeError, ValueError):
    """A node's kind and payload disagree, or the dialect forbids the node."""


class DocumentNotFoundError(SchemaTreeError, KeyError):
    """No document with the requested id exists in the collection."""


class UnsupportedOperationError(SchemaTreeError):
    """The operation does not exist in the session's dialect."""


class InvalidImportError(SchemaTreeError):
    """Imported text is not valid JSON or failed shallow validation.

    Attributes:
        errors: Human-readable reasons, one per failed check.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid import")
