"""Substring search over document titles and contents."""

from __future__ import annotations

import sqlite3

from mynotes.db.documents import _row_to_document
from mynotes.db.models import Document


def search_documents(conn: sqlite3.Connection, query: str) -> list[Document]:
    """Return documents whose title or content contains *query*.

    Matching goes through :meth:`Document.matches` (``str.casefold``), the
    same rule the tree filter applies, so both agree on non-ASCII text and
    treat ``%`` / ``_`` literally.  Results are ordered most recently
    modified first.  An empty query matches every document.
    """
    rows = conn.execute(
        "SELECT * FROM documents ORDER BY updated_at DESC, id DESC"
    ).fetchall()
    documents = (_row_to_document(r) for r in rows)
    return [d for d in documents if d.matches(query)]
