"""Category management commands."""

from typing import Optional

import typer

from cli.context import load_context, open_store, report_errors, save_context

category_app = typer.Typer(help="Manage categories.", no_args_is_help=True)


def _require_name(name: str) -> str:
    if not name.strip():
        typer.echo("❌ Category name must not be blank.")
        raise typer.Exit(code=1)
    return name.strip()


@category_app.command("list")
@report_errors
def category_list() -> None:
    """List all categories in display order."""
    store = open_store()
    active_id = load_context().active_category_id
    for cat in store.list_categories():
        marker = "*" if cat.id == active_id else " "
        parent = "" if cat.is_top_level else f"  parent={cat.parent_id}"
        count = store.count_documents(cat.id)
        typer.echo(f"{marker} {cat.name} \t[{cat.id}]  {count} notes{parent}")


@category_app.command("add")
@report_errors
def category_add(
    name: str = typer.Argument(..., help="Name of the new category."),
    parent: Optional[int] = typer.Option(None, "--parent", help="Parent category id."),
) -> None:
    """Create a category (top-level unless --parent is given)."""
    name = _require_name(name)
    store = open_store()
    if parent is not None and store.get_category(parent) is None:
        typer.echo(f"❌ Parent category {parent} not found.")
        raise typer.Exit(code=1)
    new_id = store.add_category(name, parent)
    typer.echo(f"✅ Category created: {name} ({new_id})")


@category_app.command("rename")
@report_errors
def category_rename(
    category_id: int = typer.Argument(..., help="Category id."),
    name: str = typer.Argument(..., help="New name."),
) -> None:
    """Rename a category."""
    name = _require_name(name)
    store = open_store()
    if store.get_category(category_id) is None:
        typer.echo(f"❌ Category {category_id} not found.")
        raise typer.Exit(code=1)
    store.rename_category(category_id, name)

    ctx = load_context()
    if ctx.active_category_id == category_id:
        ctx.active_category_name = name
        save_context(ctx)
    typer.echo(f"✅ Renamed category {category_id} to {name}")


@category_app.command("move")
@report_errors
def category_move(
    category_id: int = typer.Argument(..., help="Category id."),
    parent: Optional[int] = typer.Option(
        None, "--parent", help="New parent id (omit to make it top-level)."
    ),
) -> None:
    """Move a category under another one, or to the top level."""
    store = open_store()
    if store.get_category(category_id) is None:
        typer.echo(f"❌ Category {category_id} not found.")
        raise typer.Exit(code=1)
    store.move_category(category_id, parent)
    where = f"under {parent}" if parent is not None else "to the top level"
    typer.echo(f"✅ Moved category {category_id} {where}")


@category_app.command("order")
@report_errors
def category_order(
    category_id: int = typer.Argument(..., help="Category id."),
    position: int = typer.Argument(..., help="Sort key; lower comes first."),
) -> None:
    """Set where a category sits among its siblings."""
    store = open_store()
    if store.get_category(category_id) is None:
        typer.echo(f"❌ Category {category_id} not found.")
        raise typer.Exit(code=1)
    store.set_category_order(category_id, position)
    typer.echo(f"✅ Category {category_id} now sorts at {position}")


@category_app.command("delete")
@report_errors
def category_delete(
    category_id: int = typer.Argument(..., help="Category id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a category, its sub-categories and all of their notes."""
    store = open_store()
    cat = store.get_category(category_id)
    if cat is None:
        typer.echo(f"❌ Category {category_id} not found.")
        raise typer.Exit(code=1)
    if not yes and not typer.confirm(f"Delete category '{cat.name}' and all its notes?"):
        typer.echo("Aborted.")
        raise typer.Exit()

    store.delete_category(category_id)

    ctx = load_context()
    if ctx.active_category_id is not None and store.get_category(ctx.active_category_id) is None:
        ctx.active_category_id = None
        ctx.active_category_name = None
        save_context(ctx)
    typer.echo(f"🗑️ Deleted category: {cat.name}")


@category_app.command("use")
@report_errors
def category_use(
    category_id: int = typer.Argument(..., help="Category id."),
) -> None:
    """Select the category new and imported notes go into."""
    store = open_store()
    cat = store.get_category(category_id)
    if cat is None:
        typer.echo(f"❌ Category {category_id} not found.")
        raise typer.Exit(code=1)
    ctx = load_context()
    ctx.active_category_id = cat.id
    ctx.active_category_name = cat.name
    save_context(ctx)
    typer.echo(f"📂 Active category: {cat.name}")
