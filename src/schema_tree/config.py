"""EditorConfig: immutable settings for sessions, history and projection."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["EditorConfig"]


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Immutable configuration shared by collections and editing sessions.

    Attributes:
        history_limit: Maximum number of past snapshots kept for undo (>= 1).
        projection_cache_size: Number of projected documents held in the
            LRU projection cache (>= 1).
        export_indent: Indentation width of exported JSON text (>= 0).
        xml_indent: Indentation unit of projected XML, repeated per depth.
    """

    history_limit: int = 50
    projection_cache_size: int = 128
    export_indent: int = 2
    xml_indent: str = "  "

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            msg = f"history_limit must be >= 1, got {self.history_limit}"
            raise ValueError(msg)
        if self.projection_cache_size < 1:
            msg = (
                "projection_cache_size must be >= 1, "
                f"got {self.projection_cache_size}"
            )
            raise ValueError(msg)
        if self.export_indent < 0:
            msg = f"export_indent must be >= 0, got {self.export_indent}"
            raise ValueError(msg)
        if self.xml_indent.strip():
            msg = f"xml_indent must be whitespace, got {self.xml_indent!r}"
            raise ValueError(msg)
