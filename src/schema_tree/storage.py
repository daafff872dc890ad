"""Concrete DocumentStore implementations.

- MemoryStore:   keeps deep copies in a dict; for tests and embedding.
- JsonFileStore: one ``<key>.json`` file per collection in a directory,
                 written atomically through a temporary file.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog

__all__ = ["JsonFileStore", "MemoryStore"]

logger = structlog.get_logger()


class MemoryStore:
    """In-process store. Values are copied in and out so callers never alias."""

    def __init__(self) -> None:
        self._data: dict[str, list[dict[str, Any]]] = {}

    def load(self, key: str) -> list[dict[str, Any]] | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        self._data[key] = copy.deepcopy(documents)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStore:
    """Persist each collection as pretty-printed JSON under ``directory``.

    Args:
        directory: Folder holding the ``<key>.json`` files. Created on first
            save if missing.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.root = Path(directory).resolve()

    def path_for(self, key: str) -> Path:
        if not key or Path(key).name != key:
            msg = f"invalid storage key {key!r}"
            raise ValueError(msg)
        return self.root / f"{key}.json"

    def load(self, key: str) -> list[dict[str, Any]] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            msg = f"{path} does not contain a JSON array"
            raise ValueError(msg)
        logger.debug("store_loaded", path=str(path), documents=len(data))
        return data

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        path = self.path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(documents, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("store_saved", path=str(path), documents=len(documents))
