"""Note commands: create, edit, import and export documents."""

from pathlib import Path
from typing import Optional

import typer

from mynotes.db.models import SyntaxLanguage
from mynotes.errors import DocumentNotFoundError
from mynotes.importer import export_document, import_file
from mynotes.session import DocumentSession
from mynotes.store import NoteStore
from cli.context import open_store, report_errors, resolve_category
from cli.editor import EditorError, edit_document

note_app = typer.Typer(help="Create, edit and organise notes.", no_args_is_help=True)


def _require_title(title: str) -> str:
    if not title.strip():
        typer.echo("❌ Note title must not be blank.")
        raise typer.Exit(code=1)
    return title.strip()


@note_app.command("new")
@report_errors
def note_new(
    title: str = typer.Argument("Untitled", help="Title of the new note."),
    category: Optional[int] = typer.Option(None, "--category", "-c", help="Category id."),
    language: str = typer.Option("Plain", "--language", "-l", help="Syntax language."),
    content: str = typer.Option("", "--content", help="Initial content."),
    edit: bool = typer.Option(False, "--edit", help="Open in the editor afterwards."),
) -> None:
    """Create a note in the given (or active) category."""
    title = _require_title(title)
    lang = SyntaxLanguage.parse(language)
    store = open_store()
    category_id = resolve_category(store, category)
    doc_id = store.add_document(category_id, title, content, lang)
    typer.echo(f"✅ Note created: {title} ({doc_id})")
    if edit:
        _edit(store, doc_id)


@note_app.command("list")
@report_errors
def note_list(
    category: Optional[int] = typer.Option(None, "--category", "-c", help="Category id."),
) -> None:
    """List the notes of the given (or active) category, by title."""
    store = open_store()
    category_id = resolve_category(store, category)
    docs = store.list_documents(category_id)
    if not docs:
        typer.echo("No notes in this category.")
        return
    for doc in docs:
        typer.echo(f" - {doc.title} [{doc.id}]  {doc.syntax_language.display_name}")


@note_app.command("show")
@report_errors
def note_show(
    document_id: int = typer.Argument(..., help="Note id."),
) -> None:
    """Print a note to stdout."""
    store = open_store()
    doc = store.get_document(document_id)
    if doc is None:
        raise DocumentNotFoundError(document_id)
    words = len(doc.content.split())
    typer.echo(f"{doc.title}  ({doc.syntax_language.display_name}, {words} words)")
    typer.echo("-" * 40)
    typer.echo(doc.content)
    typer.echo("-" * 40)


def _edit(store: NoteStore, document_id: int) -> None:
    try:
        changed = edit_document(store, document_id)
    except EditorError as exc:
        typer.echo(f"⚠️ {exc}; note left unchanged.")
        raise typer.Exit(code=1) from exc
    typer.echo("✅ Saved." if changed else "No changes.")


@note_app.command("edit")
@report_errors
def note_edit(
    document_id: int = typer.Argument(..., help="Note id."),
) -> None:
    """Open a note in the configured editor and save it afterwards."""
    _edit(open_store(), document_id)


@note_app.command("rename")
@report_errors
def note_rename(
    document_id: int = typer.Argument(..., help="Note id."),
    title: str = typer.Argument(..., help="New title."),
) -> None:
    """Change a note's title."""
    title = _require_title(title)
    session = DocumentSession(open_store())
    session.open_document(document_id)
    session.set_title(title)
    session.close()
    typer.echo(f"✅ Renamed note {document_id} to {title}")


@note_app.command("language")
@report_errors
def note_language(
    document_id: int = typer.Argument(..., help="Note id."),
    language: str = typer.Argument(..., help="Syntax language, e.g. Python."),
) -> None:
    """Change a note's syntax-highlighting language."""
    session = DocumentSession(open_store())
    session.open_document(document_id)
    session.set_language(language)
    session.close()
    typer.echo(f"✅ Note {document_id} is now {SyntaxLanguage.parse(language).display_name}")


@note_app.command("delete")
@report_errors
def note_delete(
    document_id: int = typer.Argument(..., help="Note id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a single note."""
    store = open_store()
    doc = store.get_document(document_id)
    if doc is None:
        raise DocumentNotFoundError(document_id)
    if not yes and not typer.confirm(f"Delete note '{doc.title}'?"):
        typer.echo("Aborted.")
        raise typer.Exit()
    store.delete_document(document_id)
    typer.echo(f"🗑️ Deleted: {doc.title}")


@note_app.command("import")
@report_errors
def note_import(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to import."),
    category: Optional[int] = typer.Option(None, "--category", "-c", help="Category id."),
) -> None:
    """Import a text file; its extension decides the syntax language."""
    store = open_store()
    category_id = resolve_category(store, category)
    doc_id = import_file(store, category_id, path)
    doc = store.get_document(doc_id)
    typer.echo(f"✅ Imported: {path.name} ({doc_id}, {doc.syntax_language.display_name})")


@note_app.command("export")
@report_errors
def note_export(
    document_id: int = typer.Argument(..., help="Note id."),
    output: Path = typer.Argument(..., dir_okay=False, help="Destination file."),
) -> None:
    """Write a note's content to a file."""
    written = export_document(open_store(), document_id, output)
    typer.echo(f"✅ Exported to {written.absolute()}")
