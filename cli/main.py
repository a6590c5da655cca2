"""MyNotes CLI: entry-point for all note operations.

Usage:
    python cli/main.py --help

Command groups:
    db        database initialisation
    category  category management
    note      note creation, editing, import / export
    search    substring search over all notes
    tree      the category tree, optionally filtered
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from mynotes.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from mynotes.config import settings
from mynotes.tree import build_tree
from cli.commands.category import category_app
from cli.commands.note import note_app
from cli.context import open_store, report_errors
from cli.rendering import render_tree

app = typer.Typer(
    name="mynotes",
    help="MyNotes: hierarchical notes in a local SQLite database.",
    no_args_is_help=True,
)
app.add_typer(category_app, name="category")
app.add_typer(note_app, name="note")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables, seed "General")."""
    open_store()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# Search / tree
# ---------------------------------------------------------------------------
@app.command("search")
@report_errors
def search(
    query: str = typer.Argument(..., help="Text to look for in titles and contents."),
) -> None:
    """Find notes containing QUERY, most recently modified first."""
    store = open_store()
    results = store.search_documents(query)
    if not results:
        typer.echo(f"No notes match {query!r}.")
        return
    for doc in results:
        stamp = doc.updated_at.strftime("%Y-%m-%d %H:%M")
        typer.echo(f"  {doc.id}  {doc.title!r}  [{doc.syntax_language.display_name}]  {stamp}")


@app.command("tree")
@report_errors
def tree(
    filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Only show matching notes."),
) -> None:
    """Show the category tree with its notes."""
    store = open_store()
    nodes = build_tree(store, filter)
    if not nodes:
        typer.echo(f"No notes match {filter!r}." if filter else "No categories.")
        return
    typer.echo(render_tree(nodes))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
