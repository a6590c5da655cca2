"""Database initialisation and schema-version helpers.

``init_db(conn)`` is idempotent and safe to call on every startup.
``schema_version`` records which layout a database file was created with;
a file stamped by a newer release is refused rather than misread.
"""

from __future__ import annotations

import logging
import sqlite3

from mynotes.config import settings
from mynotes.db.models import DEFAULT_CATEGORY_NAME, utcnow

logger = logging.getLogger(__name__)

# Layout of schema.sql; bump when the tables change.
SCHEMA_VERSION = 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_schema() -> str:
    """Load the bundled schema.sql."""
    return settings.schema_path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes, then seed the default category.

    This function is **idempotent**: every DDL statement uses ``IF NOT EXISTS``
    and the seed only runs when the ``categories`` table is empty.

    Args:
        conn: An open, configured SQLite connection.
    """
    # executescript() issues an implicit COMMIT before execution, which is
    # fine for a DDL-only script.
    conn.executescript(_read_schema())
    _ensure_version_table(conn)
    _stamp_version(conn)
    seed_default_category(conn)


def seed_default_category(conn: sqlite3.Connection) -> bool:
    """Insert the "General" category if no category exists.

    Returns:
        ``True`` if a category was inserted.
    """
    with conn:
        count = conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]
        if count:
            return False
        now = utcnow().isoformat(timespec="microseconds")
        conn.execute(
            """
            INSERT INTO categories (name, parent_id, sort_order, created_at, updated_at)
            VALUES (?, NULL, 0, ?, ?)
            """,
            (DEFAULT_CATEGORY_NAME, now, now),
        )
    logger.info("Seeded default category %r", DEFAULT_CATEGORY_NAME)
    return True


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    """Create the internal schema-version tracking table if absent."""
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version    INTEGER PRIMARY KEY,
                applied_at TEXT DEFAULT (datetime('now'))
            )
            """
        )


def current_version(conn: sqlite3.Connection) -> int:
    """Return the stamped schema version (0 for an unstamped file)."""
    row = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return row[0] if row else 0


def _stamp_version(conn: sqlite3.Connection) -> None:
    """Record :data:`SCHEMA_VERSION`, refusing files from a newer release.

    Raises:
        sqlite3.DatabaseError: The file was stamped with a higher version.
    """
    found = current_version(conn)
    if found > SCHEMA_VERSION:
        raise sqlite3.DatabaseError(
            f"schema version {found} is newer than supported ({SCHEMA_VERSION})"
        )
    if found < SCHEMA_VERSION:
        with conn:
            conn.execute(
                "INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,)
            )
        logger.info("Stamped schema version %d", SCHEMA_VERSION)
