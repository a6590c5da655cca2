"""Pydantic schemas shared by the routers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, StringConstraints

from mynotes.db.models import NEW_CATEGORY_NAME, UNTITLED, Category, Document, SyntaxLanguage

# Blank names and titles are rejected before they reach storage.
NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CategoryCreate(BaseModel):
    name: NonBlank = NEW_CATEGORY_NAME
    parent_id: Optional[int] = None
    sort_order: int = 0


class CategoryRename(BaseModel):
    name: NonBlank


class CategoryMove(BaseModel):
    parent_id: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    parent_id: Optional[int]
    sort_order: int
    created_at: datetime
    updated_at: datetime


class DocumentCreate(BaseModel):
    category_id: int
    title: NonBlank = UNTITLED
    content: str = ""
    syntax_language: SyntaxLanguage = SyntaxLanguage.PLAIN


class DocumentUpdate(BaseModel):
    title: Optional[NonBlank] = None
    content: Optional[str] = None
    syntax_language: Optional[SyntaxLanguage] = None


class DocumentResponse(BaseModel):
    id: int
    category_id: int
    title: str
    content: str
    syntax_language: SyntaxLanguage
    created_at: datetime
    updated_at: datetime


class TreeNodeResponse(BaseModel):
    category: CategoryResponse
    documents: list[DocumentResponse]
    children: list["TreeNodeResponse"]
    expanded: bool


TreeNodeResponse.model_rebuild()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def category_response(cat: Category) -> dict[str, Any]:
    return {
        "id": cat.id,
        "name": cat.name,
        "parent_id": cat.parent_id,
        "sort_order": cat.sort_order,
        "created_at": cat.created_at,
        "updated_at": cat.updated_at,
    }


def document_response(doc: Document) -> dict[str, Any]:
    return {
        "id": doc.id,
        "category_id": doc.category_id,
        "title": doc.title,
        "content": doc.content,
        "syntax_language": doc.syntax_language,
        "created_at": doc.created_at,
        "updated_at": doc.updated_at,
    }
