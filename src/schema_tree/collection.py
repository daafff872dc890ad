"""DocumentCollection: the flat list of documents of one dialect.

The collection owns persistence. It loads from its store once, on first
access, and saves the whole list after every change. Any exception raised
by the store is logged with its traceback and swallowed: the in-memory
documents stay correct even when they could not be read or written. An
empty store can be seeded with starter documents (see ``schema_tree.samples``).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from schema_tree.codec import (
    decode_document,
    encode_document,
    export_collection,
    parse_json,
    validate_er_document,
)
from schema_tree.config import EditorConfig
from schema_tree.dialects import Dialect, DialectName
from schema_tree.documents import Document
from schema_tree.errors import InvalidImportError, SchemaTreeError
from schema_tree.ids import generate_id
from schema_tree.storage import MemoryStore

if TYPE_CHECKING:
    from schema_tree.protocols import DocumentStore

__all__ = ["DocumentCollection"]

logger = structlog.get_logger()


class DocumentCollection:
    """All documents of one dialect, backed by a DocumentStore.

    Args:
        dialect: Dialect of every document in the collection.
        store:   Persistence backend. Defaults to a fresh ``MemoryStore``.
        config:  Editor settings. Defaults to ``EditorConfig()``.
        seed:    Returns wire-form documents to start from when the store holds
                 nothing for this dialect. The seeded list is saved right away.
    """

    def __init__(
        self,
        dialect: Dialect,
        store: DocumentStore | None = None,
        config: EditorConfig | None = None,
        seed: Callable[[], list[dict[str, Any]]] | None = None,
    ) -> None:
        self.dialect = dialect
        self.config: EditorConfig = config if config is not None else EditorConfig()
        self._store: Any = store if store is not None else MemoryStore()
        self._documents: list[Document] = []
        self._seed = seed
        self._loaded = False

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read the collection from the store. Only the first call has effect."""
        if self._loaded:
            return
        self._loaded = True
        key = self.dialect.storage_key
        try:
            saved = self._store.load(key)
        except Exception as exc:
            logger.warning("store_load_failed", key=key, error=str(exc), exc_info=True)
            return
        if not saved and self._seed is not None:
            self._load_seed(key)
            return
        for raw in saved or []:
            try:
                self._documents.append(decode_document(raw, self.dialect))
            except SchemaTreeError as exc:
                logger.warning("document_skipped", key=key, error=str(exc))
        logger.debug("collection_loaded", key=key, documents=len(self._documents))

    def save(self) -> bool:
        """Write the collection to the store. Returns False if the write failed."""
        key = self.dialect.storage_key
        try:
            self._store.save(key, [encode_document(d) for d in self.documents])
        except Exception as exc:
            logger.warning("store_save_failed", key=key, error=str(exc), exc_info=True)
            return False
        return True

    def _load_seed(self, key: str) -> None:
        assert self._seed is not None
        self._documents = [decode_document(raw, self.dialect) for raw in self._seed()]
        self.save()
        logger.info("collection_seeded", key=key, documents=len(self._documents))

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    @property
    def documents(self) -> tuple[Document, ...]:
        self.load()
        return tuple(self._documents)

    def get(self, document_id: str) -> Document | None:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None

    def create(self, name: str, description: str | None = None, **metadata: Any) -> Document:
        """Add an empty document. ``metadata`` sets dialect root fields."""
        document = self.dialect.document_type(
            id=generate_id(), name=name, description=description, **metadata
        )
        self.add(document)
        return document

    def add(self, document: Document) -> None:
        if not isinstance(document, self.dialect.document_type):
            msg = f"{type(document).__name__} does not belong to the {self.dialect.name} dialect"
            raise TypeError(msg)
        self.load()
        self._documents.append(document)
        self.save()

    def replace(self, document: Document) -> bool:
        """Swap in a new version of an existing document (matched by id)."""
        self.load()
        for index, current in enumerate(self._documents):
            if current.id == document.id:
                self._documents[index] = document
                return True
        return False

    def remove(self, document_id: str) -> bool:
        self.load()
        before = len(self._documents)
        self._documents = [d for d in self._documents if d.id != document_id]
        if len(self._documents) == before:
            return False
        self.save()
        return True

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_document(self, text: str) -> Document:
        """Parse ``text`` and add it as a new document with a fresh id.

        ER documents must pass ``validate_er_document`` first.

        Raises:
            InvalidImportError: Malformed JSON, failed validation, or content
                the tree cannot represent. The collection is left unchanged.
        """
        data = parse_json(text)
        if self.dialect.name is DialectName.ER:
            errors = validate_er_document(data)
            if errors:
                logger.info("import_rejected", errors=errors)
                raise InvalidImportError(errors)
        document = decode_document(data, self.dialect, fresh_id=True)
        self.add(document)
        logger.debug("document_imported", document_id=document.id, name=document.name)
        return document

    def export_all(self) -> str:
        return export_collection(self.documents, indent=self.config.export_indent)
