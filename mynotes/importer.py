"""File import / export: the bridge between plain files and documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from mynotes.db.models import SyntaxLanguage
from mynotes.errors import DocumentNotFoundError, FileTransferError, ValidationError
from mynotes.store import NoteStore

logger = logging.getLogger(__name__)

LANGUAGE_BY_EXTENSION: dict[str, SyntaxLanguage] = {
    ".cs": SyntaxLanguage.CSHARP,
    ".xml": SyntaxLanguage.XML,
    ".xaml": SyntaxLanguage.XML,
    ".html": SyntaxLanguage.HTML,
    ".htm": SyntaxLanguage.HTML,
    ".js": SyntaxLanguage.JAVASCRIPT,
    ".css": SyntaxLanguage.CSS,
    ".json": SyntaxLanguage.JSON,
    ".sql": SyntaxLanguage.SQL,
    ".py": SyntaxLanguage.PYTHON,
    ".java": SyntaxLanguage.JAVA,
    ".cpp": SyntaxLanguage.CPP,
    ".c": SyntaxLanguage.CPP,
    ".h": SyntaxLanguage.CPP,
    ".php": SyntaxLanguage.PHP,
    ".md": SyntaxLanguage.MARKDOWN,
}


def language_for_extension(extension: str) -> SyntaxLanguage:
    """Map a file extension (``".py"`` or ``"py"``, any case) to a language.

    Unknown extensions map to ``Plain``.
    """
    ext = extension.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return LANGUAGE_BY_EXTENSION.get(ext, SyntaxLanguage.PLAIN)


def import_text(store: NoteStore, category_id: int, filename: str, text: str) -> int:
    """Create a document from raw *text*; the title is *filename* itself."""
    name = Path(filename).name
    lang = language_for_extension(Path(name).suffix)
    doc_id = store.add_document(category_id, name, text, lang)
    logger.info("Imported %r as document %d (%s)", name, doc_id, lang.value)
    return doc_id


def import_file(store: NoteStore, category_id: int, path: Union[Path, str]) -> int:
    """Read a UTF-8 text file and import it into *category_id*.

    Raises:
        ValidationError: The file is not UTF-8 text.
        FileTransferError: The file could not be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError(f"{path.name} is not a UTF-8 text file") from exc
    except OSError as exc:
        raise FileTransferError(f"Could not read {path}: {exc.strerror or exc}") from exc
    return import_text(store, category_id, path.name, text)


def export_document(store: NoteStore, document_id: int, path: Union[Path, str]) -> Path:
    """Write a document's content to *path* as UTF-8.

    Raises:
        DocumentNotFoundError: If *document_id* no longer exists.
        FileTransferError: If *path* cannot be written.
    """
    document = store.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    path = Path(path)
    try:
        path.write_text(document.content, encoding="utf-8")
    except OSError as exc:
        raise FileTransferError(f"Could not write {path}: {exc.strerror or exc}") from exc
    logger.info("Exported document %d to %s", document_id, path)
    return path
