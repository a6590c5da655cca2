"""Category endpoints.

Routes
------
GET    /categories                      List categories in (sort_order, name) order
POST   /categories                      Create a category
GET    /categories/{id}                 Fetch one category
PUT    /categories/{id}                 Rename a category
POST   /categories/{id}/move            Re-parent a category
DELETE /categories/{id}                 Delete a category, its subtree and documents
GET    /categories/{id}/documents       Documents of one category, by title
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from mynotes.api.routers.schemas import (
    CategoryCreate,
    CategoryMove,
    CategoryRename,
    CategoryResponse,
    DocumentResponse,
    category_response,
    document_response,
)
from mynotes.db.models import Category
from mynotes.errors import ValidationError
from mynotes.store import NoteStore

router = APIRouter()


def _existing(store: NoteStore, category_id: int) -> Category:
    cat = store.get_category(category_id)
    if cat is None:
        raise HTTPException(status_code=404, detail=f"Category not found: {category_id!r}")
    return cat


@router.get("", response_model=list[CategoryResponse])
def list_all(request: Request) -> list[dict[str, Any]]:
    store: NoteStore = request.app.state.store
    return [category_response(c) for c in store.list_categories()]


@router.post("", response_model=CategoryResponse, status_code=201)
def create(body: CategoryCreate, request: Request) -> dict[str, Any]:
    """Create a category, optionally under *parent_id*."""
    store: NoteStore = request.app.state.store
    if body.parent_id is not None:
        _existing(store, body.parent_id)
    new_id = store.add_category(body.name, body.parent_id, body.sort_order)
    return category_response(_existing(store, new_id))


@router.get("/{category_id}", response_model=CategoryResponse)
def get_one(category_id: int, request: Request) -> dict[str, Any]:
    return category_response(_existing(request.app.state.store, category_id))


@router.put("/{category_id}", response_model=CategoryResponse)
def rename(category_id: int, body: CategoryRename, request: Request) -> dict[str, Any]:
    store: NoteStore = request.app.state.store
    _existing(store, category_id)
    store.rename_category(category_id, body.name)
    return category_response(_existing(store, category_id))


@router.post("/{category_id}/move", response_model=CategoryResponse)
def move(category_id: int, body: CategoryMove, request: Request) -> dict[str, Any]:
    store: NoteStore = request.app.state.store
    _existing(store, category_id)
    try:
        store.move_category(category_id, body.parent_id)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return category_response(_existing(store, category_id))


@router.delete("/{category_id}")
def remove(category_id: int, request: Request) -> Response:
    """Delete a category, every descendant category and all their documents."""
    request.app.state.store.delete_category(category_id)
    return Response(status_code=204)


@router.get("/{category_id}/documents", response_model=list[DocumentResponse])
def documents(category_id: int, request: Request) -> list[dict[str, Any]]:
    store: NoteStore = request.app.state.store
    _existing(store, category_id)
    return [document_response(d) for d in store.list_documents(category_id)]
