"""Project management commands (acting as the active user)."""

import json
from pathlib import Path

import typer

from ideacanvas.access import require_owner, require_permission
from ideacanvas.db import get_connection, init_db
from ideacanvas.db.comments import list_comments
from ideacanvas.db.edges import get_canvas
from ideacanvas.db.models import Permission
from ideacanvas.db.projects import (
    create_project,
    delete_project,
    export_project,
    get_user_projects,
)
from ideacanvas.db.shares import list_shares
from ideacanvas.errors import CanvasError
from cli.context import load_context, require_user, save_context

project_app = typer.Typer(help="Manage canvas projects.")


def _require_active_project() -> None:
    ctx = load_context()
    if not ctx.active_project_id:
        typer.echo("❌ No active project selected.")
        typer.echo("Run 'project new <name>' or 'project switch <name>' first.")
        raise typer.Exit(code=1)


@project_app.command("new")
@require_user
def project_new(
    name: str = typer.Argument(..., help="Name of the new project."),
    description: str = typer.Option(None, help="Optional description."),
) -> None:
    """Create a project owned by the active user and switch to it."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        project = create_project(conn, name=name, owner_id=ctx.active_user_id, description=description)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    typer.echo(f"✅ Project created: {project.name} ({project.id})")
    ctx.active_project_id = project.id
    ctx.active_project_name = project.name
    save_context(ctx)
    typer.echo(f"📂 Switched to project: {project.name}")


@project_app.command("list")
@require_user
def project_list() -> None:
    """List projects the active user owns or has been shared."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        projects = get_user_projects(conn, ctx.active_user_id)
    finally:
        conn.close()

    if not projects:
        typer.echo("No projects found.")
        return
    typer.echo("Projects:")
    for p in projects:
        marker = "*" if p.id == ctx.active_project_id else " "
        owner = "owner" if p.owner_id == ctx.active_user_id else "shared"
        typer.echo(f"{marker} {p.name} \t[{p.id}] ({owner})")


@project_app.command("switch")
@require_user
def project_switch(
    identifier: str = typer.Argument(..., help="Project name or id.")
) -> None:
    """Switch the active project."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        projects = get_user_projects(conn, ctx.active_user_id)
    finally:
        conn.close()

    target = next((p for p in projects if identifier in (p.id, p.name)), None)
    if target is None:
        typer.echo(f"❌ Project '{identifier}' not found.")
        raise typer.Exit(code=1)

    ctx.active_project_id = target.id
    ctx.active_project_name = target.name
    save_context(ctx)
    typer.echo(f"📂 Switched to project: {target.name}")


@project_app.command("show")
@require_user
def project_show() -> None:
    """Show a summary of the active project's canvas."""
    _require_active_project()
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        permission = require_permission(conn, ctx.active_project_id, ctx.active_user_id, Permission.VIEW)
        canvas = get_canvas(conn, ctx.active_project_id)
        comments = list_comments(conn, ctx.active_project_id)
        shares = list_shares(conn, ctx.active_project_id)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    by_type: dict[str, int] = {}
    for node in canvas.nodes:
        by_type[node.type.value] = by_type.get(node.type.value, 0) + 1

    typer.echo(f"\n📊 Project: {ctx.active_project_name}")
    typer.echo(f"   ID: {ctx.active_project_id}")
    typer.echo(f"   Your permission: {permission.value}")
    typer.echo("-" * 40)
    typer.echo(f"   Nodes: {len(canvas.nodes)}")
    for type_, count in sorted(by_type.items()):
        typer.echo(f"    - {type_}: {count}")
    typer.echo(f"   Edges: {len(canvas.edges)}")
    typer.echo(f"   Comments: {len(comments)}")
    typer.echo(f"   Shares: {len(shares)}")
    typer.echo("")


@project_app.command("export")
@require_user
def project_export(
    output: Path = typer.Option(None, help="Output JSON file path. Defaults to <project_name>.json")
) -> None:
    """Export the active project to a JSON file."""
    _require_active_project()
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        require_permission(conn, ctx.active_project_id, ctx.active_user_id, Permission.VIEW)
        data = export_project(conn, ctx.active_project_id)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    if not output:
        safe_name = "".join(
            c for c in ctx.active_project_name if c.isalnum() or c in (" ", "-", "_")
        ).strip()
        output = Path(f"{safe_name.replace(' ', '_')}.json")

    output.write_text(json.dumps(data, indent=2), encoding="utf-8")
    typer.echo(f"✅ Exported to {output.absolute()}")


@project_app.command("delete")
@require_user
def project_delete(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Delete the active project and everything on its canvas (owner only)."""
    _require_active_project()
    ctx = load_context()
    if not yes:
        typer.confirm(f"Delete project '{ctx.active_project_name}'?", abort=True)

    conn = get_connection()
    init_db(conn)
    try:
        require_owner(conn, ctx.active_project_id, ctx.active_user_id)
        deleted = delete_project(conn, ctx.active_project_id)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    ctx.active_project_id = None
    ctx.active_project_name = None
    save_context(ctx)
    typer.echo("🗑️  Project deleted." if deleted else "Nothing to delete.")
