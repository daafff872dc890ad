"""ProjectionCache: LRU-backed memo of projected documents.

Documents are immutable and every edit produces a new Document object, so
identity is a sound cache key: the same object always projects to the same
output. Each entry keeps a reference to its document, which both lets a hit
be confirmed with ``is`` and keeps the object alive so its ``id()`` cannot be
reused while the entry exists. Eviction is silent.

Example::

    from schema_tree.cache import ProjectionCache

    cache = ProjectionCache(max_size=64)
    first = cache.project(document)    # computed
    second = cache.project(document)   # served from memory
"""

from __future__ import annotations

import copy
from typing import Any

from cachetools import LRUCache

from schema_tree.documents import Document
from schema_tree.projection import project

__all__ = ["ProjectionCache"]


class ProjectionCache:
    """LRU-backed caching wrapper around ``project``.

    Args:
        max_size: Maximum number of projected documents held in memory.
            Defaults to 128. The least-recently-used entry is dropped
            when exceeded.
        xml_indent: Indentation unit passed through to the XML projector.
    """

    def __init__(self, max_size: int = 128, xml_indent: str = "  ") -> None:
        self._cache: LRUCache[int, tuple[Document, Any]] = LRUCache(maxsize=max_size)
        self._xml_indent = xml_indent
        self.hits = 0
        self.misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(self, document: Document) -> Any:
        """Return the projection of ``document``, computing it at most once.

        JSON results are deep-copied on the way out so callers cannot
        corrupt the cached value by mutating what they receive.
        """
        entry = self._cache.get(id(document))
        if entry is not None and entry[0] is document:
            self.hits += 1
            result = entry[1]
        else:
            self.misses += 1
            result = project(document, xml_indent=self._xml_indent)
            self._cache[id(document)] = (document, result)
        return result if isinstance(result, str) else copy.deepcopy(result)

    def clear(self) -> None:
        self._cache.clear()
