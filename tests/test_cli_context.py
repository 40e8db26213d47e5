"""Tests for the CLI context management module."""

import json

import pytest
import typer
from typer.testing import CliRunner

from cli.context import CliContext, _get_context_path, load_context, require_user, save_context

runner = CliRunner()


@pytest.fixture
def temp_context_dir(tmp_path, monkeypatch):
    """Override the config directory to use a temporary path."""
    context_dir = tmp_path / ".ideacanvas_cli"
    monkeypatch.setattr("cli.context.settings.cli_config_dir", context_dir)
    return context_dir


def test_load_default_context(temp_context_dir):
    """Should return defaults when no file exists."""
    ctx = load_context()
    assert isinstance(ctx, CliContext)
    assert ctx.active_user_id is None
    assert ctx.active_project_id is None


def test_save_and_load(temp_context_dir):
    ctx = CliContext(
        active_user_id="u-1",
        active_user_email="ada@example.com",
        active_project_id="p-1",
        active_project_name="Launch",
    )
    save_context(ctx)

    path = _get_context_path()
    assert path.exists()
    assert json.loads(path.read_text())["active_user_email"] == "ada@example.com"
    assert load_context() == ctx


def test_corrupt_file_falls_back_to_defaults(temp_context_dir):
    temp_context_dir.mkdir(parents=True)
    _get_context_path().write_text("{not json", encoding="utf-8")
    assert load_context() == CliContext()


def test_unknown_keys_fall_back_to_defaults(temp_context_dir):
    temp_context_dir.mkdir(parents=True)
    _get_context_path().write_text(json.dumps({"surprise": 1}), encoding="utf-8")
    assert load_context() == CliContext()


def test_require_user_blocks_without_user(temp_context_dir):
    app = typer.Typer()

    @app.command()
    @require_user
    def guarded():
        typer.echo("ran")

    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "No active user selected" in result.stdout

    save_context(CliContext(active_user_id="u-1", active_user_email="ada@example.com"))
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "ran" in result.stdout
