"""AI document commands.

These let an operator (or a shell-driven generation worker) inspect a node's
document and drive the ``generating -> completed | failed`` transitions.
"""

from pathlib import Path
from typing import Optional

import typer

from ideacanvas.access import require_permission
from ideacanvas.db import get_connection, init_db
from ideacanvas.db.ai_documents import (
    complete_document,
    fail_document,
    get_document,
    get_document_by_node,
)
from ideacanvas.db.models import AiDocument, Permission
from ideacanvas.db.nodes import get_node
from ideacanvas.errors import CanvasError, NotFoundError
from cli.context import load_context, require_user

document_app = typer.Typer(help="Inspect AI documents and record generation results.")


def _echo_document(doc: AiDocument) -> None:
    typer.echo(f"📝 {doc.document_type.value} [{doc.id}]  status={doc.status.value}")
    typer.echo(f"   Node   : {doc.node_id}")
    typer.echo(f"   Prompt : {doc.prompt}")
    if doc.failure_reason:
        typer.echo(f"   Reason : {doc.failure_reason}")
    if doc.generated_content:
        typer.echo("")
        typer.echo(doc.generated_content)


def _authorize(conn, node_id: str, user_id: str, minimum: Permission) -> None:
    node = get_node(conn, node_id)
    if node is None:
        raise NotFoundError("Canvas node", node_id)
    require_permission(conn, node.project_id, user_id, minimum)


@document_app.command("show")
@require_user
def document_show(
    node_id: str = typer.Argument(..., help="Node the document is attached to.")
) -> None:
    """Print the AI document attached to a node."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        _authorize(conn, node_id, ctx.active_user_id, Permission.VIEW)
        doc = get_document_by_node(conn, node_id)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    _echo_document(doc)


@document_app.command("complete")
@require_user
def document_complete(
    document_id: str = typer.Argument(..., help="AI document id."),
    content: Optional[str] = typer.Option(None, help="Generated content."),
    content_file: Optional[Path] = typer.Option(None, help="Read generated content from a file."),
) -> None:
    """Mark a generating document as completed with its content."""
    if (content is None) == (content_file is None):
        typer.echo("❌ Pass exactly one of --content or --content-file.")
        raise typer.Exit(code=1)
    text = content if content is not None else content_file.read_text(encoding="utf-8")

    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        doc = get_document(conn, document_id)
        _authorize(conn, doc.node_id, ctx.active_user_id, Permission.EDIT)
        doc = complete_document(conn, document_id, text)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    typer.echo(f"✅ Document {doc.id} completed ({len(doc.generated_content)} chars).")


@document_app.command("fail")
@require_user
def document_fail(
    document_id: str = typer.Argument(..., help="AI document id."),
    reason: Optional[str] = typer.Option(None, help="Why generation failed."),
) -> None:
    """Mark a generating document as failed."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        doc = get_document(conn, document_id)
        _authorize(conn, doc.node_id, ctx.active_user_id, Permission.EDIT)
        doc = fail_document(conn, document_id, reason)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    typer.echo(f"⚠️  Document {doc.id} marked as failed.")
