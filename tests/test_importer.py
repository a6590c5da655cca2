"""File import / export tests."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from mynotes.db.models import SyntaxLanguage
from mynotes.errors import DocumentNotFoundError, FileTransferError, ValidationError
from mynotes.importer import (
    export_document,
    import_file,
    import_text,
    language_for_extension,
)
from mynotes.store import NoteStore


@pytest.fixture()
def store() -> Generator[NoteStore, None, None]:
    s = NoteStore(":memory:")
    s.initialize()
    yield s
    s.close()


@pytest.fixture()
def general_id(store: NoteStore) -> int:
    return store.list_categories()[0].id


class TestLanguageForExtension:
    @pytest.mark.parametrize(
        ("ext", "expected"),
        [
            (".cs", SyntaxLanguage.CSHARP),
            (".xaml", SyntaxLanguage.XML),
            (".htm", SyntaxLanguage.HTML),
            (".js", SyntaxLanguage.JAVASCRIPT),
            (".json", SyntaxLanguage.JSON),
            (".sql", SyntaxLanguage.SQL),
            (".py", SyntaxLanguage.PYTHON),
            (".h", SyntaxLanguage.CPP),
            (".md", SyntaxLanguage.MARKDOWN),
        ],
    )
    def test_known_extensions(self, ext: str, expected: SyntaxLanguage) -> None:
        assert language_for_extension(ext) is expected

    def test_case_and_dot_insensitive(self) -> None:
        assert language_for_extension("PY") is SyntaxLanguage.PYTHON
        assert language_for_extension(".Md") is SyntaxLanguage.MARKDOWN

    @pytest.mark.parametrize("ext", [".txt", ".log", "", ".rs"])
    def test_unknown_is_plain(self, ext: str) -> None:
        assert language_for_extension(ext) is SyntaxLanguage.PLAIN


class TestImport:
    def test_import_text_uses_filename_as_title(
        self, store: NoteStore, general_id: int
    ) -> None:
        doc_id = import_text(store, general_id, "notes/query.sql", "SELECT 1;")
        doc = store.get_document(doc_id)
        assert doc.title == "query.sql"
        assert doc.content == "SELECT 1;"
        assert doc.syntax_language is SyntaxLanguage.SQL

    def test_import_file(self, store: NoteStore, general_id: int, tmp_path: Path) -> None:
        src = tmp_path / "hello.py"
        src.write_text("print('héllo')\n", encoding="utf-8")
        doc = store.get_document(import_file(store, general_id, src))
        assert doc.title == "hello.py"
        assert doc.content == "print('héllo')\n"
        assert doc.syntax_language is SyntaxLanguage.PYTHON
        assert doc.category_id == general_id

    def test_import_binary_rejected(
        self, store: NoteStore, general_id: int, tmp_path: Path
    ) -> None:
        src = tmp_path / "blob.bin"
        src.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(ValidationError, match="UTF-8"):
            import_file(store, general_id, src)
        assert store.list_all_documents() == []


    def test_import_missing_file(
        self, store: NoteStore, general_id: int, tmp_path: Path
    ) -> None:
        with pytest.raises(FileTransferError, match="Could not read"):
            import_file(store, general_id, tmp_path / "absent.txt")
        assert store.list_all_documents() == []


class TestExport:
    def test_export_writes_content(
        self, store: NoteStore, general_id: int, tmp_path: Path
    ) -> None:
        doc_id = store.add_document(general_id, "Out", "line 1\nline 2")
        target = export_document(store, doc_id, tmp_path / "out.txt")
        assert target.read_text(encoding="utf-8") == "line 1\nline 2"

    def test_export_missing_document(self, store: NoteStore, tmp_path: Path) -> None:
        with pytest.raises(DocumentNotFoundError):
            export_document(store, 777, tmp_path / "nothing.txt")
        assert not (tmp_path / "nothing.txt").exists()

    def test_export_into_missing_directory(
        self, store: NoteStore, general_id: int, tmp_path: Path
    ) -> None:
        doc_id = store.add_document(general_id, "Out", "text")
        with pytest.raises(FileTransferError, match="Could not write"):
            export_document(store, doc_id, tmp_path / "nope" / "out.txt")
