"""Tree projection: the nested category/document view of the flat tables.

The tree is rebuilt from scratch after every mutation and on every change of
the filter text; there is no incremental diffing.  Note collections are small
enough for that to be instant.

Search filtering
----------------
With a non-blank filter, each category keeps only the documents whose title
or content contains the filter (case-insensitive).  A category with no
matching documents and no surviving child categories is pruned; a category
whose descendants match stays visible even without direct matches.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from mynotes.db.models import Category, Document
from mynotes.store import NoteStore

logger = logging.getLogger(__name__)


@dataclass
class CategoryNode:
    category: Category
    documents: list[Document] = field(default_factory=list)
    children: list["CategoryNode"] = field(default_factory=list)
    expanded: bool = True

    def document_count(self) -> int:
        """Documents in this node and all of its descendants."""
        return len(self.documents) + sum(c.document_count() for c in self.children)

    def walk(self) -> Iterator["CategoryNode"]:
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


class ItemKind(str, Enum):
    CATEGORY = "category"
    DOCUMENT = "document"


@dataclass(frozen=True)
class TreeItem:
    """One visible row of the tree, tagged with what it refers to.

    ``category_id`` is the owning category for a document row and the
    category itself for a category row.
    """

    kind: ItemKind
    id: int
    label: str
    badge: str
    depth: int
    category_id: int


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------

def _active_filter(search_filter: Optional[str]) -> Optional[str]:
    if search_filter is None or not search_filter.strip():
        return None
    return search_filter


def build_tree(store: NoteStore, search_filter: Optional[str] = None) -> list[CategoryNode]:
    """Build the category hierarchy, optionally filtered by *search_filter*.

    Categories whose ``parent_id`` refers to a missing category are shown at
    the top level.  A ``parent_id`` cycle is shown at the top level too, cut
    where a category would appear inside itself.
    """
    needle = _active_filter(search_filter)
    categories = store.list_categories()
    by_id = {c.id: c for c in categories}

    children: dict[int, list[Category]] = defaultdict(list)
    roots: list[Category] = []
    for cat in categories:  # already in (sort_order, name) order
        if cat.parent_id is None or cat.parent_id not in by_id:
            roots.append(cat)
        else:
            children[cat.parent_id].append(cat)

    documents: dict[int, list[Document]] = defaultdict(list)
    for doc in store.list_all_documents():  # already ordered by title
        documents[doc.category_id].append(doc)

    visited: set[int] = set()

    def _build(cat: Category, path: frozenset[int]) -> Optional[CategoryNode]:
        visited.add(cat.id)
        docs = documents.get(cat.id, [])
        if needle is not None:
            docs = [d for d in docs if d.matches(needle)]

        node = CategoryNode(category=cat, documents=docs)
        for child in children.get(cat.id, []):
            if child.id in path:
                logger.warning(
                    "Category cycle detected: %d is its own ancestor; skipping", child.id
                )
                continue
            child_node = _build(child, path | {child.id})
            if child_node is not None:
                node.children.append(child_node)

        if needle is not None and not node.documents and not node.children:
            return None
        return node

    tree: list[CategoryNode] = []
    for root in roots:
        built = _build(root, frozenset({root.id}))
        if built is not None:
            tree.append(built)

    # Categories only reachable through a parent_id cycle: surface each cycle
    # at the top level, cut open at its first member in display order.
    for cat in categories:
        if cat.id in visited:
            continue
        logger.warning("Category %d sits under a parent cycle; shown at top level", cat.id)
        built = _build(cat, frozenset({cat.id}))
        if built is not None:
            tree.append(built)
    return tree


# ---------------------------------------------------------------------------
# Flattened, tagged view
# ---------------------------------------------------------------------------

def flatten(tree: list[CategoryNode]) -> list[TreeItem]:
    """Flatten the tree into display rows: child categories before documents."""
    items: list[TreeItem] = []

    def _visit(node: CategoryNode, depth: int) -> None:
        cat = node.category
        items.append(
            TreeItem(
                kind=ItemKind.CATEGORY,
                id=cat.id,
                label=cat.name,
                badge=f"{len(node.documents)} notes",
                depth=depth,
                category_id=cat.id,
            )
        )
        if not node.expanded:
            return
        for child in node.children:
            _visit(child, depth + 1)
        for doc in node.documents:
            items.append(
                TreeItem(
                    kind=ItemKind.DOCUMENT,
                    id=doc.id,
                    label=doc.title,
                    badge=doc.syntax_language.value,
                    depth=depth + 1,
                    category_id=doc.category_id,
                )
            )

    for root in tree:
        _visit(root, 0)
    return items


def find_node(tree: list[CategoryNode], category_id: int) -> Optional[CategoryNode]:
    for root in tree:
        for node in root.walk():
            if node.category.id == category_id:
                return node
    return None


def target_category(store: NoteStore, item: Optional[TreeItem] = None) -> int:
    """Category a new or imported note should land in.

    The selected row's category if there is one, else the first category,
    else a freshly seeded "General".
    """
    if item is not None:
        return item.category_id
    categories = store.list_categories()
    if categories:
        return categories[0].id
    return store.add_category("General")
