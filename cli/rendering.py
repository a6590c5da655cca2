"""Utilities for rendering the category tree in the CLI."""

from __future__ import annotations

from mynotes.db.models import SyntaxLanguage
from mynotes.tree import CategoryNode, ItemKind, TreeItem, flatten

_ICONS = {
    ItemKind.CATEGORY: "📁",
    ItemKind.DOCUMENT: "📝",
}


def _row(item: TreeItem) -> str:
    indent = "    " * item.depth
    if item.kind is ItemKind.CATEGORY:
        badge = item.badge
    else:
        badge = SyntaxLanguage.parse(item.badge).display_name
    return f"{indent}{_ICONS[item.kind]} {item.label}  ({badge})  [{item.id}]"


def render_tree(tree: list[CategoryNode]) -> str:
    """Render the projected tree as indented text, one row per item.

    Child categories come before a category's own documents.
    """
    return "\n".join(_row(item) for item in flatten(tree))
