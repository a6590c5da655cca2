"""Database layer package.

Public re-exports so callers can write::

    from mynotes.db import get_connection, init_db
    from mynotes.db import categories, documents
"""

from mynotes.db.connection import get_connection
from mynotes.db.migrations import init_db
from mynotes.db import categories, documents

__all__ = ["get_connection", "init_db", "categories", "documents"]
