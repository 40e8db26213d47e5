"""Persistent state for the Idea Canvas CLI.

Tracks the "active user" (the identity CLI commands act as) and the active
project.  Stored in ``<cli_config_dir>/context.json``.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from functools import wraps
from pathlib import Path
from typing import Callable

import typer

from ideacanvas.config import settings


@dataclass
class CliContext:
    active_user_id: str | None = None
    active_user_email: str | None = None
    active_project_id: str | None = None
    active_project_name: str | None = None

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
    """Load the CLI context from disk. Returns defaults if missing or unreadable."""
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


def require_user(func: Callable) -> Callable:
    """Decorator for commands that act on behalf of the active user.

    Aborts with exit code 1 when no user has been selected.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = load_context()
        if not ctx.active_user_id:
            typer.echo("❌ No active user selected.")
            typer.echo("Run 'user new <email> <name>' or 'user switch <email>' first.")
            raise typer.Exit(code=1)
        return func(*args, **kwargs)

    return wrapper
