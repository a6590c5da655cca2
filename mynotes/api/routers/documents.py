"""Document endpoints.

Routes
------
POST   /documents          Create a document in a category
GET    /documents/{id}     Fetch one document
PUT    /documents/{id}     Update title / content / language
DELETE /documents/{id}     Delete one document
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from mynotes.api.routers.schemas import (
    DocumentCreate,
    DocumentResponse,
    DocumentUpdate,
    document_response,
)
from mynotes.db.models import Document
from mynotes.store import NoteStore

router = APIRouter()


def _existing(store: NoteStore, document_id: int) -> Document:
    doc = store.get_document(document_id)
    if doc is None:
        raise HTTPException(status_code=404, detail=f"Document not found: {document_id!r}")
    return doc


@router.post("", response_model=DocumentResponse, status_code=201)
def create(body: DocumentCreate, request: Request) -> dict[str, Any]:
    store: NoteStore = request.app.state.store
    if store.get_category(body.category_id) is None:
        raise HTTPException(
            status_code=404, detail=f"Category not found: {body.category_id!r}"
        )
    new_id = store.add_document(
        body.category_id, body.title, body.content, body.syntax_language
    )
    return document_response(_existing(store, new_id))


@router.get("/{document_id}", response_model=DocumentResponse)
def get_one(document_id: int, request: Request) -> dict[str, Any]:
    return document_response(_existing(request.app.state.store, document_id))


@router.put("/{document_id}", response_model=DocumentResponse)
def update(document_id: int, body: DocumentUpdate, request: Request) -> dict[str, Any]:
    """Apply the given fields and save; ``updated_at`` is always refreshed."""
    store: NoteStore = request.app.state.store
    doc = _existing(store, document_id)
    updates = body.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=422, detail="No fields provided to update.")
    for key, value in updates.items():
        setattr(doc, key, value)
    store.save_document(doc)
    return document_response(_existing(store, document_id))


@router.delete("/{document_id}")
def remove(document_id: int, request: Request) -> Response:
    request.app.state.store.delete_document(document_id)
    return Response(status_code=204)
