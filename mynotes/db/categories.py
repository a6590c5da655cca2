"""CRUD operations for the ``categories`` table."""

from __future__ import annotations

import sqlite3
from typing import Optional

from mynotes.db.models import NEW_CATEGORY_NAME, Category, parse_timestamp, utcnow
from mynotes.errors import ValidationError

# Every category in the subtree rooted at ``?`` (the root included).
_SUBTREE_SQL = """
    WITH RECURSIVE subtree(id) AS (
        SELECT ?
        UNION
        SELECT c.id
        FROM categories c
        JOIN subtree s ON c.parent_id = s.id
    )
    SELECT id FROM subtree
"""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        parent_id=row["parent_id"],
        sort_order=row["sort_order"],
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_categories(conn: sqlite3.Connection) -> list[Category]:
    """Return every category ordered by ``(sort_order, name)``."""
    rows = conn.execute(
        "SELECT * FROM categories ORDER BY sort_order, name, id"
    ).fetchall()
    return [_row_to_category(r) for r in rows]


def get_category(conn: sqlite3.Connection, category_id: int) -> Optional[Category]:
    """Fetch a single category.  Returns ``None`` if not found."""
    row = conn.execute(
        "SELECT * FROM categories WHERE id = ?", (category_id,)
    ).fetchone()
    return _row_to_category(row) if row else None


def add_category(
    conn: sqlite3.Connection,
    name: str = NEW_CATEGORY_NAME,
    parent_id: Optional[int] = None,
    sort_order: int = 0,
) -> int:
    """Insert a new category and return its id.

    Args:
        conn: Open DB connection.
        name: Display name.  A blank name falls back to ``"New Category"``;
            prompting for a real one is the caller's job.
        parent_id: Parent category, or ``None`` for a top-level category.
        sort_order: Sibling ordering key (ties broken by name).
    """
    now = utcnow().isoformat(timespec="microseconds")
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO categories (name, parent_id, sort_order, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (name.strip() or NEW_CATEGORY_NAME, parent_id, sort_order, now, now),
        )
    return cursor.lastrowid  # type: ignore[return-value]


def rename_category(conn: sqlite3.Connection, category_id: int, new_name: str) -> None:
    """Rename a category and refresh ``updated_at``.

    A blank name falls back to ``"New Category"``, as in :func:`add_category`.
    This is a no-op if the category does not exist.
    """
    with conn:
        conn.execute(
            "UPDATE categories SET name = ?, updated_at = ? WHERE id = ?",
            (
                new_name.strip() or NEW_CATEGORY_NAME,
                utcnow().isoformat(timespec="microseconds"),
                category_id,
            ),
        )


def set_category_order(conn: sqlite3.Connection, category_id: int, sort_order: int) -> None:
    """Change a category's sibling ordering key (no-op on a missing id)."""
    with conn:
        conn.execute(
            "UPDATE categories SET sort_order = ?, updated_at = ? WHERE id = ?",
            (sort_order, utcnow().isoformat(timespec="microseconds"), category_id),
        )


def subtree_ids(conn: sqlite3.Connection, category_id: int) -> list[int]:
    """Return *category_id* plus the ids of all its descendant categories.

    ``UNION`` (not ``UNION ALL``) de-duplicates rows, so a corrupt
    ``parent_id`` cycle terminates instead of recursing forever.
    """
    if get_category(conn, category_id) is None:
        return []
    return [r[0] for r in conn.execute(_SUBTREE_SQL, (category_id,)).fetchall()]


def move_category(
    conn: sqlite3.Connection,
    category_id: int,
    new_parent_id: Optional[int],
) -> None:
    """Re-parent a category.

    Raises:
        ValidationError: If *new_parent_id* is the category itself, one of its
            descendants, or does not exist.
    """
    if new_parent_id is not None:
        if get_category(conn, new_parent_id) is None:
            raise ValidationError(f"Parent category not found: {new_parent_id!r}")
        if new_parent_id in subtree_ids(conn, category_id):
            raise ValidationError(
                f"Cannot move category {category_id!r} under its own subtree"
            )
    with conn:
        conn.execute(
            "UPDATE categories SET parent_id = ?, updated_at = ? WHERE id = ?",
            (new_parent_id, utcnow().isoformat(timespec="microseconds"), category_id),
        )


def delete_category(conn: sqlite3.Connection, category_id: int) -> int:
    """Delete a category, its descendant categories and all their documents.

    The documents and categories are removed in a single transaction, so a
    failure part-way leaves the subtree untouched.

    Returns:
        The number of documents removed.
    """
    ids = subtree_ids(conn, category_id)
    if not ids:
        return 0
    placeholders = ", ".join("?" for _ in ids)
    with conn:
        removed = conn.execute(
            f"DELETE FROM documents WHERE category_id IN ({placeholders})",  # noqa: S608
            ids,
        ).rowcount
        conn.execute(
            f"DELETE FROM categories WHERE id IN ({placeholders})",  # noqa: S608
            ids,
        )
    return removed
