"""SQLite connection factory for the notes database.

Every connection is configured the same way, whether it belongs to a
short-lived per-call store operation or to the one shared ``:memory:``
connection a test store keeps alive::

    conn = get_connection(settings.db_path)
    try:
        conn.execute("SELECT COUNT(*) FROM documents")
    finally:
        conn.close()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from mynotes.config import settings

MEMORY = ":memory:"

# Applied in order on every new connection.  The category/document cascades
# depend on foreign_keys; WAL lets a reader run while the autosave writes.
_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
    "PRAGMA busy_timeout = 2000",
)


def is_memory(db_path: Union[Path, str]) -> bool:
    return str(db_path) == MEMORY


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open *db_path* (default ``settings.db_path``) and configure it.

    The database file's directory is created on demand.  Rows come back as
    :class:`sqlite3.Row`, so columns are read by name.
    """
    path = db_path or settings.db_path
    if not is_memory(path):
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    for pragma in _PRAGMAS:
        conn.execute(pragma)
    return conn
