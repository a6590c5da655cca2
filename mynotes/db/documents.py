"""CRUD operations for the ``documents`` table."""

from __future__ import annotations

import sqlite3
from typing import Optional, Union

from mynotes.db.models import (
    UNTITLED,
    Document,
    SyntaxLanguage,
    parse_timestamp,
    utcnow,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=row["id"],
        category_id=row["category_id"],
        title=row["title"],
        content=row["content"],
        syntax_language=SyntaxLanguage.parse(row["syntax_language"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_document(
    conn: sqlite3.Connection,
    category_id: int,
    title: str = UNTITLED,
    content: str = "",
    syntax_language: Union[SyntaxLanguage, str] = SyntaxLanguage.PLAIN,
) -> int:
    """Insert a new document and return its id.

    Raises:
        sqlite3.IntegrityError: If *category_id* does not exist.
        ValidationError: If *syntax_language* is not a known language.
    """
    lang = SyntaxLanguage.parse(syntax_language)
    now = utcnow().isoformat(timespec="microseconds")
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO documents
                (category_id, title, content, syntax_language, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (category_id, title, content, lang.value, now, now),
        )
    return cursor.lastrowid  # type: ignore[return-value]


def get_document(conn: sqlite3.Connection, document_id: int) -> Optional[Document]:
    """Fetch a single document by id.  Returns ``None`` if not found."""
    row = conn.execute(
        "SELECT * FROM documents WHERE id = ?", (document_id,)
    ).fetchone()
    return _row_to_document(row) if row else None


def list_documents(conn: sqlite3.Connection, category_id: int) -> list[Document]:
    """Return the documents of one category ordered by title."""
    rows = conn.execute(
        "SELECT * FROM documents WHERE category_id = ? ORDER BY title, id",
        (category_id,),
    ).fetchall()
    return [_row_to_document(r) for r in rows]


def list_all_documents(conn: sqlite3.Connection) -> list[Document]:
    """Return every document ordered by title."""
    rows = conn.execute("SELECT * FROM documents ORDER BY title, id").fetchall()
    return [_row_to_document(r) for r in rows]


def count_documents(conn: sqlite3.Connection, category_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM documents WHERE category_id = ?", (category_id,)
    ).fetchone()
    return row[0]


def save_document(conn: sqlite3.Connection, document: Document) -> bool:
    """Overwrite title, content and language of *document* and refresh
    ``updated_at``.

    The new timestamp is written back onto *document*.  Saving a document
    whose row has been deleted is a no-op.

    Returns:
        ``True`` if a row was updated.
    """
    lang = SyntaxLanguage.parse(document.syntax_language)
    now = utcnow()
    stamp = now.isoformat(timespec="microseconds")
    with conn:
        updated = conn.execute(
            """
            UPDATE documents
            SET title = ?, content = ?, syntax_language = ?, updated_at = ?
            WHERE id = ?
            """,
            (document.title, document.content, lang.value, stamp, document.id),
        ).rowcount
    if updated:
        document.syntax_language = lang
        document.updated_at = now
    return bool(updated)


def delete_document(conn: sqlite3.Connection, document_id: int) -> None:
    """Delete a single document.

    This is a no-op if the document does not exist.
    """
    with conn:
        conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
