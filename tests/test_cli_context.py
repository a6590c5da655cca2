"""Tests for the CLI context management module."""

import pytest
import typer
from typer.testing import CliRunner

from cli.context import (
    CliContext,
    _get_context_path,
    load_context,
    open_store,
    report_errors,
    resolve_category,
    save_context,
)
from mynotes.errors import ValidationError

runner = CliRunner()


@pytest.fixture
def temp_context_dir(tmp_path, monkeypatch):
    """Point the CLI config dir and the workspace at temporary paths."""
    context_dir = tmp_path / ".mynotes_cli"
    context_dir.mkdir()
    monkeypatch.setattr("cli.context.settings.cli_config_dir", context_dir)
    monkeypatch.setattr("mynotes.config.settings.workspace_dir", tmp_path / "ws")
    return context_dir


def test_load_default_context(temp_context_dir):
    """Should return defaults when no file exists."""
    ctx = load_context()
    assert isinstance(ctx, CliContext)
    assert ctx.active_category_id is None
    assert ctx.active_category_name is None
    assert ctx.user_preferences == {}


def test_save_and_load_roundtrip(temp_context_dir):
    ctx = CliContext(
        active_category_id=3,
        active_category_name="Work",
        user_preferences={"editor": "vim"},
    )
    save_context(ctx)

    assert _get_context_path() == temp_context_dir / "context.json"
    loaded = load_context()
    assert loaded.active_category_id == 3
    assert loaded.active_category_name == "Work"
    assert loaded.user_preferences["editor"] == "vim"


def test_load_corrupt_context(temp_context_dir):
    """Should return defaults if the file is corrupt JSON."""
    (temp_context_dir / "context.json").write_text("{invalid-json", encoding="utf-8")
    assert load_context().active_category_id is None


def test_load_context_unknown_keys(temp_context_dir):
    (temp_context_dir / "context.json").write_text('{"bogus": 1}', encoding="utf-8")
    assert load_context() == CliContext()


def test_open_store_creates_database(temp_context_dir, tmp_path):
    store = open_store()
    assert (tmp_path / "ws" / "mynotes.db").exists()
    assert [c.name for c in store.list_categories()] == ["General"]


def test_open_store_failure_exits(temp_context_dir, tmp_path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setattr("mynotes.config.settings.workspace_dir", blocker / "ws")

    app = typer.Typer()

    @app.command()
    def cmd():
        open_store()

    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "Database initialization failed" in result.output


def test_resolve_category_prefers_explicit(temp_context_dir):
    store = open_store()
    work = store.add_category("Work")
    assert resolve_category(store, work) == work


def test_resolve_category_missing_explicit_exits(temp_context_dir):
    store = open_store()
    with pytest.raises(typer.Exit):
        resolve_category(store, 999)


def test_resolve_category_uses_active_context(temp_context_dir):
    store = open_store()
    work = store.add_category("Work", sort_order=5)
    save_context(CliContext(active_category_id=work, active_category_name="Work"))
    assert resolve_category(store, None) == work


def test_resolve_category_ignores_stale_context(temp_context_dir):
    store = open_store()
    general = store.list_categories()[0].id
    save_context(CliContext(active_category_id=4242, active_category_name="Gone"))
    assert resolve_category(store, None) == general


def test_report_errors_decorator():
    app = typer.Typer()

    @app.command()
    @report_errors
    def fail():
        raise ValidationError("bad input")

    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "❌ bad input" in result.output


def test_report_errors_passes_through_success():
    app = typer.Typer()

    @app.command()
    @report_errors
    def ok(name: str = typer.Argument("x")):
        typer.echo(f"hello {name}")

    result = runner.invoke(app, ["world"])
    assert result.exit_code == 0
    assert "hello world" in result.output
