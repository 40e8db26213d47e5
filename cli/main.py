"""Idea Canvas CLI: entry-point for all backend operations.

Usage:
    python cli/main.py --help

Command groups:
    db        → schema initialisation
    user      → user registry and the active identity
    project   → projects owned by or shared with the active user
    document  → AI document inspection and worker transitions
    serve     → run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from ideacanvas.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from ideacanvas.config import settings
from ideacanvas.db import get_connection, init_db
from ideacanvas.logging import configure_logging
from cli.commands.document import document_app
from cli.commands.project import project_app
from cli.commands.user import user_app

app = typer.Typer(
    name="ideacanvas",
    help="Idea Canvas backend CLI.",
    no_args_is_help=True,
)
app.add_typer(user_app, name="user")
app.add_typer(project_app, name="project")
app.add_typer(document_app, name="document")

db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    configure_logging("DEBUG" if verbose else "WARNING")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("ideacanvas.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
