"""FastAPI application factory.

Lifespan
--------
On startup the app constructs one :class:`~mynotes.store.NoteStore` (shared
across all requests via ``request.app.state.store``) and initialises the
schema.  A :class:`~mynotes.errors.StorageInitError` is not caught: the
server refuses to start without persistence.

Routers
-------
    /categories   category CRUD, move, per-category document listing
    /documents    document CRUD
    /search       substring search
    /tree         nested category/document projection
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mynotes import __version__
from mynotes.config import settings
from mynotes.errors import StorageError
from mynotes.store import NoteStore

from mynotes.api.routers import categories as categories_router
from mynotes.api.routers import documents as documents_router
from mynotes.api.routers import search as search_router
from mynotes.api.routers import tree as tree_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store on startup and release it on shutdown."""
    store = NoteStore(settings.db_path)
    store.initialize()
    app.state.store = store
    try:
        yield
    finally:
        app.state.store.close()


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="MyNotes API",
        description=(
            "REST interface for MyNotes. Exposes category and document CRUD, "
            "substring search and the filtered category tree."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(categories_router.router, prefix="/categories", tags=["categories"])
    app.include_router(documents_router.router, prefix="/documents", tags=["documents"])
    app.include_router(search_router.router, prefix="/search", tags=["search"])
    app.include_router(tree_router.router, prefix="/tree", tags=["tree"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn mynotes.api.app:app --reload
app = create_app()
