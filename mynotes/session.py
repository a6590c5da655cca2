"""Editing sessions: binding persisted documents to in-memory buffers.

Two variants share one rule: a buffer is never discarded without being
saved first.

``DocumentSession``
    One document at a time.  Opening another document saves the current
    one before the new one is read.

``TabSession``
    Any number of open documents keyed by id, each saved on its own
    switch / close, plus ``save_all`` for the autosave tick and exit.

``Autosaver`` drives the periodic silent save as a task on the running
asyncio loop.  Saves are synchronous, so a tick can never interleave with a
manual save.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from mynotes.config import settings
from mynotes.db.models import Document, SyntaxLanguage, utcnow
from mynotes.errors import DocumentNotFoundError, NotesError, ValidationError
from mynotes.store import NoteStore

logger = logging.getLogger(__name__)


@dataclass
class EditBuffer:
    """The editable text of one open document."""

    text: str = ""
    modified: bool = False

    def set_text(self, text: str) -> None:
        if text != self.text:
            self.text = text
            self.modified = True

    def load(self, text: str) -> None:
        self.text = text
        self.modified = False

    def clear(self) -> None:
        self.load("")

    @property
    def word_count(self) -> int:
        return len(self.text.split())


def _persist(store: NoteStore, document: Document, buffer: EditBuffer) -> None:
    """Copy *buffer* into *document*, stamp it and write it out.

    Raises:
        DocumentNotFoundError: The row was deleted underneath the buffer.  The
            buffer keeps its text and stays modified.
    """
    document.content = buffer.text
    document.updated_at = utcnow()
    if not store.save_document(document):
        raise DocumentNotFoundError(document.id)
    buffer.modified = False


def _fetch(store: NoteStore, document_id: int) -> Document:
    document = store.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return document


# ---------------------------------------------------------------------------
# Single-document session
# ---------------------------------------------------------------------------

class DocumentSession:
    """Closed / Open state machine over a single edit buffer."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store
        self.buffer = EditBuffer()
        self._current: Optional[Document] = None

    @property
    def is_open(self) -> bool:
        return self._current is not None

    @property
    def current(self) -> Optional[Document]:
        return self._current

    @property
    def current_id(self) -> Optional[int]:
        return self._current.id if self._current else None

    def open_document(self, document_id: int) -> Document:
        """Make *document_id* the open document.

        The currently open document is saved first.  The requested document
        is always re-read from storage.

        Raises:
            DocumentNotFoundError: The id no longer exists, or the open
                document was deleted before it could be saved.  Either way the
                previously open document and its buffer stay as they were.
        """
        if self._current is not None:
            self.save(silent=True)
        document = _fetch(self.store, document_id)
        self._current = document
        self.buffer.load(document.content)
        logger.debug("Opened document %d", document.id)
        return document

    def save(self, silent: bool = False) -> bool:
        """Persist the buffer into the open document.

        Returns ``False`` (and does nothing) when no document is open.

        Raises:
            DocumentNotFoundError: The open document was deleted elsewhere;
                the buffer is kept, still marked modified.
        """
        if self._current is None:
            return False
        _persist(self.store, self._current, self.buffer)
        if not silent:
            logger.info("Saved document %d", self._current.id)
        return True

    def close(self) -> None:
        """Save, clear the buffer and return to the closed state."""
        if self._current is None:
            return
        self.save(silent=True)
        logger.debug("Closed document %d", self._current.id)
        self._current = None
        self.buffer.clear()

    def set_title(self, title: str) -> None:
        self._require_open().title = title

    def set_language(self, language: Union[SyntaxLanguage, str]) -> None:
        self._require_open().syntax_language = SyntaxLanguage.parse(language)

    def autosave(self) -> None:
        self.save(silent=True)

    def shutdown(self) -> None:
        """Final silent save before the application exits."""
        self.close()

    def _require_open(self) -> Document:
        if self._current is None:
            raise ValidationError("No document is open")
        return self._current


# ---------------------------------------------------------------------------
# Multi-tab session
# ---------------------------------------------------------------------------

@dataclass
class Tab:
    document: Document
    buffer: EditBuffer


class TabSession:
    """Several open documents, one of them active."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store
        self._tabs: dict[int, Tab] = {}
        self.active_id: Optional[int] = None

    @property
    def open_ids(self) -> list[int]:
        return list(self._tabs)

    def is_open(self, document_id: int) -> bool:
        return document_id in self._tabs

    def tab(self, document_id: int) -> Tab:
        try:
            return self._tabs[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    def buffer(self, document_id: int) -> EditBuffer:
        return self.tab(document_id).buffer

    def open_document(self, document_id: int) -> Document:
        """Focus the tab for *document_id*, reading it fresh if not yet open."""
        if document_id in self._tabs:
            self.active_id = document_id
            return self._tabs[document_id].document
        document = _fetch(self.store, document_id)
        self._tabs[document_id] = Tab(document, EditBuffer(document.content))
        self.active_id = document_id
        return document

    def switch_to(self, document_id: int) -> None:
        """Save the active tab, then activate *document_id*."""
        self.tab(document_id)
        if self.active_id is not None and self.active_id != document_id:
            self.save(self.active_id)
        self.active_id = document_id

    def save(self, document_id: int) -> None:
        tab = self.tab(document_id)
        _persist(self.store, tab.document, tab.buffer)

    def save_all(self, silent: bool = False) -> int:
        """Save every tab.

        A tab whose document has vanished does not stop the others from
        being saved; the first such id is raised once all were attempted.
        """
        missing: list[int] = []
        for document_id, tab in self._tabs.items():
            try:
                _persist(self.store, tab.document, tab.buffer)
            except DocumentNotFoundError:
                missing.append(document_id)
        if missing:
            raise DocumentNotFoundError(missing[0])
        if not silent:
            logger.info("Saved %d open documents", len(self._tabs))
        return len(self._tabs)

    def close(self, document_id: int) -> None:
        """Save then close one tab."""
        self.save(document_id)
        self.forget(document_id)

    def forget(self, document_id: int) -> None:
        """Drop a tab without saving; used after the document was deleted."""
        self._tabs.pop(document_id, None)
        if self.active_id == document_id:
            self.active_id = next(iter(self._tabs), None)

    def close_category(self, category_ids: Union[int, set[int]]) -> list[int]:
        """Drop (without saving) every tab whose document lives in the given
        categories; they are about to be cascade deleted."""
        ids = {category_ids} if isinstance(category_ids, int) else set(category_ids)
        dropped = [i for i, t in self._tabs.items() if t.document.category_id in ids]
        for document_id in dropped:
            self.forget(document_id)
        return dropped

    def autosave(self) -> None:
        self.save_all(silent=True)

    def shutdown(self) -> None:
        self.save_all(silent=True)
        self._tabs.clear()
        self.active_id = None


# ---------------------------------------------------------------------------
# Autosave
# ---------------------------------------------------------------------------

class Autosaver:
    """Periodically saves a session on the running event loop."""

    def __init__(
        self,
        target: Union[DocumentSession, TabSession],
        interval: Optional[float] = None,
    ) -> None:
        self.target = target
        self.interval = settings.autosave_interval if interval is None else interval
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the autosave loop.  Must be called with a running loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.target.autosave()
            except NotesError as exc:
                logger.error("Autosave failed: %s", exc)
                continue
            self.ticks += 1
            logger.debug("Autosave tick %d", self.ticks)
