"""History: snapshot-based undo/redo for one open document.

Each entry is a whole Document. Documents are immutable and share unchanged
subtrees, so keeping a snapshot costs only the nodes an edit actually copied.

State machine::

    record(doc): past += [present] (keep last ``limit``); present = doc; future = []
    undo():      future = [present] + future; present = past.pop()
    redo():      past += [present]; present = future.pop(0)

Recording after an undo discards the pending redo entries.
"""

from __future__ import annotations

from collections import deque

import structlog

from schema_tree.documents import Document

__all__ = ["History"]

logger = structlog.get_logger()


class History:
    """Undo/redo stacks around a present document.

    Args:
        document: The document as it was when it was opened.
        limit: Maximum number of past snapshots kept; the oldest ones are
            dropped silently. Defaults to 50.
    """

    def __init__(self, document: Document, limit: int = 50) -> None:
        if limit < 1:
            msg = f"limit must be >= 1, got {limit}"
            raise ValueError(msg)
        self._limit = limit
        self._past: deque[Document] = deque(maxlen=limit)
        self._present = document
        self._future: deque[Document] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def present(self) -> Document:
        return self._present

    @property
    def past(self) -> tuple[Document, ...]:
        """Prior snapshots, oldest first."""
        return tuple(self._past)

    @property
    def future(self) -> tuple[Document, ...]:
        """Snapshots available for redo, nearest first."""
        return tuple(self._future)

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def record(self, document: Document) -> None:
        """Adopt ``document`` as present after a successful mutation."""
        self._past.append(self._present)
        self._present = document
        if self._future:
            logger.debug("history_redo_discarded", entries=len(self._future))
            self._future.clear()

    def undo(self) -> Document | None:
        """Step back one snapshot. Returns the new present, or None if empty."""
        if not self._past:
            return None
        self._future.appendleft(self._present)
        self._present = self._past.pop()
        return self._present

    def redo(self) -> Document | None:
        """Step forward one snapshot. Returns the new present, or None if empty."""
        if not self._future:
            return None
        self._past.append(self._present)
        self._present = self._future.popleft()
        return self._present
