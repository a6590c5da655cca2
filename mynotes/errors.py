"""Exception hierarchy shared by the storage, session and surface layers."""

from __future__ import annotations


class NotesError(Exception):
    """Base class for every error raised by MyNotes."""


class StorageError(NotesError):
    """A read or write against the database failed.

    Raised for any ``sqlite3.Error`` after the store has been initialised.
    The triggering operation is considered not applied; nothing is retried.
    """


class StorageInitError(StorageError):
    """The database could not be created, opened or seeded.

    Fatal: callers must report it and terminate rather than run without
    persistence.
    """


class DocumentNotFoundError(NotesError, LookupError):
    """A document id no longer refers to a stored document."""

    def __init__(self, document_id: int) -> None:
        super().__init__(f"Document not found: {document_id!r}")
        self.document_id = document_id


class ValidationError(NotesError, ValueError):
    """Input rejected before it reaches storage."""


class FileTransferError(NotesError):
    """Reading an import file or writing an export file failed.

    Wraps the underlying ``OSError``; nothing was imported or exported.
    """
