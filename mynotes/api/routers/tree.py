"""Tree endpoint.

Routes
------
GET /tree?filter=<text>    Nested {category, documents, children, expanded}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request

from mynotes.api.routers.schemas import (
    TreeNodeResponse,
    category_response,
    document_response,
)
from mynotes.tree import CategoryNode, build_tree

router = APIRouter()


def _node_dict(node: CategoryNode) -> dict[str, Any]:
    return {
        "category": category_response(node.category),
        "documents": [document_response(d) for d in node.documents],
        "children": [_node_dict(c) for c in node.children],
        "expanded": node.expanded,
    }


@router.get("", response_model=list[TreeNodeResponse])
def tree(request: Request, filter: Optional[str] = None) -> list[dict[str, Any]]:
    """Return the category hierarchy, pruned to matches when *filter* is set."""
    return [_node_dict(n) for n in build_tree(request.app.state.store, filter)]
