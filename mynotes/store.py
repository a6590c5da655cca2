"""The storage service: durable CRUD and search for categories and documents.

A :class:`NoteStore` is constructed once at startup and handed to every
consumer (CLI commands, API routes, sessions, the tree builder)::

    store = NoteStore(settings.db_path)
    store.initialize()

Each call opens a connection, runs one statement or one short transaction,
and closes it again.  The exception is a ``":memory:"`` store, which keeps a
single connection alive for its whole lifetime since a fresh in-memory
connection would always see an empty database.

Any ``sqlite3.Error`` raised after initialisation is re-raised as
:class:`~mynotes.errors.StorageError`; nothing is retried.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from mynotes.db import categories as category_db
from mynotes.db import documents as document_db
from mynotes.db.connection import MEMORY, get_connection, is_memory
from mynotes.db.migrations import init_db, seed_default_category
from mynotes.db.models import (
    NEW_CATEGORY_NAME,
    UNTITLED,
    Category,
    Document,
    SyntaxLanguage,
)
from mynotes.db.search import search_documents
from mynotes.errors import StorageError, StorageInitError

logger = logging.getLogger(__name__)


class NoteStore:
    """Category/document storage backed by one SQLite file."""

    def __init__(self, db_path: Union[Path, str]) -> None:
        self.db_path = db_path
        self._shared: Optional[sqlite3.Connection] = None
        if is_memory(db_path):
            self._shared = get_connection(MEMORY)

    def __repr__(self) -> str:
        return f"NoteStore({str(self.db_path)!r})"

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------
    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if self._shared is not None:
            yield self._shared
            return
        conn = get_connection(self.db_path)
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _op(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._connect() as conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("Storage operation %r failed: %s", action, exc)
            raise StorageError(f"Could not {action}: {exc}") from exc

    def close(self) -> None:
        """Release the shared in-memory connection, if any."""
        if self._shared is not None:
            self._shared.close()
            self._shared = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        """Ensure the schema exists and seed the default category.

        Safe to call on every startup.

        Raises:
            StorageInitError: If the database cannot be created or opened.
        """
        try:
            with self._connect() as conn:
                init_db(conn)
        except (sqlite3.Error, OSError) as exc:
            logger.critical("Database initialisation failed at %s: %s", self.db_path, exc)
            raise StorageInitError(
                f"Database initialization failed at {self.db_path}: {exc}"
            ) from exc
        logger.debug("Database ready at %s", self.db_path)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def list_categories(self) -> list[Category]:
        with self._op("list categories") as conn:
            return category_db.list_categories(conn)

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._op("read category") as conn:
            return category_db.get_category(conn, category_id)

    def add_category(
        self,
        name: str = NEW_CATEGORY_NAME,
        parent_id: Optional[int] = None,
        sort_order: int = 0,
    ) -> int:
        with self._op("add category") as conn:
            new_id = category_db.add_category(conn, name, parent_id, sort_order)
        logger.info("Added category %d %r (parent=%r)", new_id, name, parent_id)
        return new_id

    def rename_category(self, category_id: int, new_name: str) -> None:
        with self._op("rename category") as conn:
            category_db.rename_category(conn, category_id, new_name)

    def move_category(self, category_id: int, new_parent_id: Optional[int]) -> None:
        with self._op("move category") as conn:
            category_db.move_category(conn, category_id, new_parent_id)

    def set_category_order(self, category_id: int, sort_order: int) -> None:
        with self._op("reorder category") as conn:
            category_db.set_category_order(conn, category_id, sort_order)

    def category_subtree(self, category_id: int) -> list[int]:
        """Ids of *category_id* and all its descendants (empty if missing)."""
        with self._op("read category subtree") as conn:
            return category_db.subtree_ids(conn, category_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category with its whole subtree and their documents.

        If that leaves no category at all, the default one is seeded again.
        """
        with self._op("delete category") as conn:
            removed = category_db.delete_category(conn, category_id)
            seed_default_category(conn)
        logger.info("Deleted category %d (%d documents)", category_id, removed)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------
    def list_documents(self, category_id: int) -> list[Document]:
        with self._op("list documents") as conn:
            return document_db.list_documents(conn, category_id)

    def list_all_documents(self) -> list[Document]:
        with self._op("list documents") as conn:
            return document_db.list_all_documents(conn)

    def count_documents(self, category_id: int) -> int:
        with self._op("count documents") as conn:
            return document_db.count_documents(conn, category_id)

    def get_document(self, document_id: int) -> Optional[Document]:
        with self._op("read document") as conn:
            return document_db.get_document(conn, document_id)

    def add_document(
        self,
        category_id: int,
        title: str = UNTITLED,
        content: str = "",
        syntax_language: Union[SyntaxLanguage, str] = SyntaxLanguage.PLAIN,
    ) -> int:
        with self._op("add document") as conn:
            new_id = document_db.add_document(
                conn, category_id, title, content, syntax_language
            )
        logger.info("Added document %d %r to category %d", new_id, title, category_id)
        return new_id

    def save_document(self, document: Document) -> bool:
        with self._op("save document") as conn:
            saved = document_db.save_document(conn, document)
        if not saved:
            logger.warning("Save skipped: document %d no longer exists", document.id)
        return saved

    def delete_document(self, document_id: int) -> None:
        with self._op("delete document") as conn:
            document_db.delete_document(conn, document_id)
        logger.info("Deleted document %d", document_id)

    def search_documents(self, query: str) -> list[Document]:
        with self._op("search documents") as conn:
            return search_documents(conn, query)
