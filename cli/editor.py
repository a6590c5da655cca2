"""External editor integration for the MyNotes CLI.

``note edit`` runs a :class:`~mynotes.session.DocumentSession` against the
user's preferred editor ($EDITOR): the buffer is written to a draft file,
the editor is launched, and whatever it leaves behind is read back into the
buffer and saved when the session closes.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from mynotes.config import settings
from mynotes.db.models import Document, SyntaxLanguage
from mynotes.importer import LANGUAGE_BY_EXTENSION
from mynotes.session import DocumentSession
from mynotes.store import NoteStore
from cli.context import load_context

# First registered extension per language, so the editor can highlight drafts.
_EXTENSION_BY_LANGUAGE: dict[SyntaxLanguage, str] = {}
for _ext, _lang in LANGUAGE_BY_EXTENSION.items():
    _EXTENSION_BY_LANGUAGE.setdefault(_lang, _ext)


class EditorError(RuntimeError):
    """The editor exited with a non-zero status."""


def get_editor_command() -> str:
    """Determine the editor command to use."""
    ctx = load_context()

    # 1. User preference from context.json
    if "editor" in ctx.user_preferences:
        return ctx.user_preferences["editor"]

    # 2. Environment variable
    if "EDITOR" in os.environ:
        return os.environ["EDITOR"]

    # 3. Platform defaults
    if os.name == "nt":
        if shutil.which("code"):
            return "code -w"
        return "notepad"
    if shutil.which("vim"):
        return "vim"
    if shutil.which("nano"):
        return "nano"
    return "vi"


def open_editor(file_path: Path) -> None:
    """Open the user's editor on *file_path* and wait for it to exit."""
    # shell=True to handle commands with arguments (e.g. "code -w")
    ret = subprocess.call(f'{get_editor_command()} "{file_path}"', shell=True)
    if ret != 0:
        raise EditorError(f"Editor exited with code {ret}")


def draft_path(document: Document) -> Path:
    """Draft file for *document* under ``<cli_config_dir>/drafts``."""
    drafts_dir = settings.cli_config_dir / "drafts"
    drafts_dir.mkdir(parents=True, exist_ok=True)

    safe_title = "".join(
        c for c in document.title if c.isalnum() or c in (" ", "-", "_")
    ).strip()
    safe_title = safe_title.replace(" ", "_") or "untitled"
    ext = _EXTENSION_BY_LANGUAGE.get(document.syntax_language, ".txt")
    return drafts_dir / f"{safe_title}_{document.id}{ext}"


def edit_document(store: NoteStore, document_id: int) -> bool:
    """Edit a document in the external editor.

    Returns:
        ``True`` if the content changed.  The session saves either way when
        it closes; an editor failure leaves the stored content untouched.
    """
    session = DocumentSession(store)
    document = session.open_document(document_id)
    draft = draft_path(document)
    draft.write_text(session.buffer.text, encoding="utf-8")
    try:
        open_editor(draft)
        session.buffer.set_text(draft.read_text(encoding="utf-8"))
        return session.buffer.modified
    finally:
        session.close()
        draft.unlink(missing_ok=True)
