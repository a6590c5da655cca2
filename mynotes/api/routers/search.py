"""Search endpoint.

Routes
------
GET /search?q=<query>     Documents whose title or content contains q,
                          most recently modified first
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from mynotes.api.routers.schemas import DocumentResponse, document_response

router = APIRouter()


@router.get("", response_model=list[DocumentResponse])
def search(request: Request, q: str = "") -> list[dict[str, Any]]:
    """Case-insensitive substring search over titles and contents."""
    return [document_response(d) for d in request.app.state.store.search_documents(q)]
