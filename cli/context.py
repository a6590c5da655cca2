"""Persistent state management for the MyNotes CLI.

Tracks the "active category" (the CLI's equivalent of the selected tree
item) and user preferences.  Stored in `<cli_config_dir>/context.json`.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from mynotes.config import settings
from mynotes.errors import NotesError, StorageInitError
from mynotes.store import NoteStore
from mynotes.tree import target_category


@dataclass
class CliContext:
    active_category_id: int | None = None
    active_category_name: str | None = None
    user_preferences: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: str) -> CliContext:
        try:
            raw = json.loads(data)
            return cls(**raw)
        except (json.JSONDecodeError, TypeError):
            return cls()


def _get_context_path() -> Path:
    """Return the path to the context JSON file."""
    return settings.cli_config_dir / "context.json"


def load_context() -> CliContext:
    """Load the CLI context from disk. Returns defaults if missing/corrupt."""
    path = _get_context_path()
    if not path.exists():
        return CliContext()
    try:
        return CliContext.from_json(path.read_text(encoding="utf-8"))
    except OSError:
        return CliContext()


def save_context(ctx: CliContext) -> None:
    """Save the CLI context to disk."""
    settings.cli_config_dir.mkdir(parents=True, exist_ok=True)
    _get_context_path().write_text(ctx.to_json(), encoding="utf-8")


def open_store() -> NoteStore:
    """Construct and initialise the store for one CLI invocation.

    An initialisation failure is fatal: it is reported and the process exits
    with code 1.
    """
    store = NoteStore(settings.db_path)
    try:
        store.initialize()
    except StorageInitError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return store


def resolve_category(store: NoteStore, category_id: Optional[int]) -> int:
    """Pick the category a command should act on.

    Order: the explicit ``--category`` option, the active category from the
    context file (if it still exists), then the first listed category.
    """
    if category_id is not None:
        if store.get_category(category_id) is None:
            typer.echo(f"❌ Category {category_id} not found.")
            raise typer.Exit(code=1)
        return category_id

    ctx = load_context()
    if ctx.active_category_id is not None and store.get_category(ctx.active_category_id):
        return ctx.active_category_id
    return target_category(store)


def report_errors(func: Callable) -> Callable:
    """Decorator for CLI commands: turn MyNotes errors into a message + exit 1.

    The failed operation is not applied; nothing is retried.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except NotesError as exc:
            typer.echo(f"❌ {exc}")
            raise typer.Exit(code=1) from exc

    return wrapper
