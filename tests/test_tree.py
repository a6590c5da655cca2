"""Tree projection tests: hierarchy, filtering, flattening and targeting."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Generator

import pytest

from mynotes.store import NoteStore
from mynotes.tree import (
    CategoryNode,
    ItemKind,
    TreeItem,
    build_tree,
    find_node,
    flatten,
    target_category,
)


@pytest.fixture()
def store() -> Generator[NoteStore, None, None]:
    s = NoteStore(":memory:")
    s.initialize()
    yield s
    s.close()


@pytest.fixture()
def general_id(store: NoteStore) -> int:
    return store.list_categories()[0].id


def _names(tree: list[CategoryNode]) -> list[str]:
    return [n.category.name for n in tree]


class TestBuildTree:
    def test_fresh_store_has_general_only(self, store: NoteStore) -> None:
        tree = build_tree(store)
        assert _names(tree) == ["General"]
        assert tree[0].documents == []
        assert tree[0].children == []

    def test_nesting_and_documents(self, store: NoteStore, general_id: int) -> None:
        child = store.add_category("Child", parent_id=general_id)
        store.add_document(child, "Deep note")
        store.add_document(general_id, "Top note")

        tree = build_tree(store)

        assert _names(tree) == ["General"]
        root = tree[0]
        assert [d.title for d in root.documents] == ["Top note"]
        assert _names(root.children) == ["Child"]
        assert [d.title for d in root.children[0].documents] == ["Deep note"]
        assert root.document_count() == 2

    def test_roots_follow_sort_order(self, store: NoteStore) -> None:
        store.add_category("Zulu", sort_order=-5)
        store.add_category("Alpha", sort_order=3)
        assert _names(build_tree(store)) == ["Zulu", "General", "Alpha"]

    def test_missing_parent_is_shown_as_root(self, tmp_path: Path) -> None:
        db_path = tmp_path / "notes.db"
        s = NoteStore(db_path)
        s.initialize()
        orphan = s.add_category("Orphan")
        with sqlite3.connect(db_path) as raw:
            raw.execute("PRAGMA foreign_keys = OFF")
            raw.execute("UPDATE categories SET parent_id = 999 WHERE id = ?", (orphan,))
        raw.close()

        assert "Orphan" in _names(build_tree(s))

    def test_parent_cycle_terminates(self, tmp_path: Path) -> None:
        db_path = tmp_path / "notes.db"
        s = NoteStore(db_path)
        s.initialize()
        a = s.add_category("A")
        b = s.add_category("B", parent_id=a)
        with sqlite3.connect(db_path) as raw:
            raw.execute("UPDATE categories SET parent_id = ? WHERE id = ?", (b, a))
        raw.close()

        tree = build_tree(s)

        assert _names(tree) == ["General", "A"]
        cycle_root = tree[1]
        assert _names(cycle_root.children) == ["B"]
        assert cycle_root.children[0].children == []


class TestFilter:
    def test_child_without_matches_is_pruned(self, store: NoteStore) -> None:
        a = store.add_category("A")
        b = store.add_category("B", parent_id=a)
        store.add_document(a, "hit", "needle")
        store.add_document(b, "miss", "haystack")

        tree = build_tree(store, "needle")

        assert _names(tree) == ["A"]
        assert [d.title for d in tree[0].documents] == ["hit"]
        assert tree[0].children == []

    def test_match_in_descendant_keeps_ancestor(self, store: NoteStore) -> None:
        a = store.add_category("A")
        b = store.add_category("B", parent_id=a)
        store.add_document(b, "x", "needle here")
        store.add_document(a, "unrelated", "haystack")

        tree = build_tree(store, "needle")

        assert _names(tree) == ["A"]
        assert tree[0].documents == []
        assert _names(tree[0].children) == ["B"]
        assert [d.title for d in tree[0].children[0].documents] == ["x"]

    def test_filter_is_case_insensitive(self, store: NoteStore, general_id: int) -> None:
        store.add_document(general_id, "Shopping", "Buy MILK")
        tree = build_tree(store, "milk")
        assert [d.title for d in tree[0].documents] == ["Shopping"]

    def test_filter_matches_title(self, store: NoteStore, general_id: int) -> None:
        store.add_document(general_id, "Meeting notes", "")
        assert len(build_tree(store, "meeting")[0].documents) == 1

    def test_no_matches_prunes_everything(self, store: NoteStore, general_id: int) -> None:
        store.add_document(general_id, "Note", "text")
        assert build_tree(store, "absent") == []

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_filter_shows_everything(
        self, store: NoteStore, general_id: int, blank
    ) -> None:
        store.add_category("Empty")
        store.add_document(general_id, "Note")
        tree = build_tree(store, blank)
        assert _names(tree) == ["Empty", "General"]
        assert len(tree[1].documents) == 1


class TestFlatten:
    def test_child_categories_before_documents(
        self, store: NoteStore, general_id: int
    ) -> None:
        child = store.add_category("Child", parent_id=general_id)
        top = store.add_document(general_id, "Top", syntax_language="Python")
        deep = store.add_document(child, "Deep")

        items = flatten(build_tree(store))

        assert [(i.kind, i.id, i.depth) for i in items] == [
            (ItemKind.CATEGORY, general_id, 0),
            (ItemKind.CATEGORY, child, 1),
            (ItemKind.DOCUMENT, deep, 2),
            (ItemKind.DOCUMENT, top, 1),
        ]
        assert items[0].badge == "1 notes"
        assert items[3].badge == "Python"
        assert items[3].category_id == general_id

    def test_collapsed_node_hides_contents(self, store: NoteStore, general_id: int) -> None:
        store.add_document(general_id, "Hidden")
        tree = build_tree(store)
        tree[0].expanded = False
        items = flatten(tree)
        assert len(items) == 1
        assert items[0].kind is ItemKind.CATEGORY


class TestFindNode:
    def test_finds_nested(self, store: NoteStore, general_id: int) -> None:
        child = store.add_category("Child", parent_id=general_id)
        node = find_node(build_tree(store), child)
        assert node is not None
        assert node.category.name == "Child"

    def test_missing_returns_none(self, store: NoteStore) -> None:
        assert find_node(build_tree(store), 4040) is None


class TestTargetCategory:
    def test_uses_selected_document_category(self, store: NoteStore) -> None:
        work = store.add_category("Work")
        doc = store.add_document(work, "Item")
        item = TreeItem(ItemKind.DOCUMENT, doc, "Item", "Plain", 1, work)
        assert target_category(store, item) == work

    def test_uses_selected_category(self, store: NoteStore) -> None:
        work = store.add_category("Work")
        item = TreeItem(ItemKind.CATEGORY, work, "Work", "0 notes", 0, work)
        assert target_category(store, item) == work

    def test_defaults_to_first_category(self, store: NoteStore) -> None:
        first = store.add_category("Aaa", sort_order=-1)
        assert target_category(store) == first

    def test_seeds_general_when_empty(self, store: NoteStore) -> None:
        store._shared.execute("DELETE FROM categories")
        store._shared.commit()
        new_id = target_category(store)
        assert store.get_category(new_id).name == "General"
