"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from mynotes.api import app

    uvicorn mynotes.api:app --reload
"""

from mynotes.api.app import app

__all__ = ["app"]
