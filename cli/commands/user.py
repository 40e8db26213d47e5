"""User registry commands."""

import typer

from ideacanvas.db import get_connection, init_db
from ideacanvas.db.users import create_user, get_user_by_email, list_users
from ideacanvas.errors import CanvasError
from cli.context import load_context, save_context

user_app = typer.Typer(help="Register users and choose who the CLI acts as.")


@user_app.command("new")
def user_new(
    email: str = typer.Argument(..., help="Email address (unique)."),
    name: str = typer.Argument(..., help="Display name."),
) -> None:
    """Register a user and make it the active user."""
    conn = get_connection()
    init_db(conn)

    try:
        user = create_user(conn, email=email, name=name)
    except CanvasError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    ctx = load_context()
    ctx.active_user_id = user.id
    ctx.active_user_email = user.email
    save_context(ctx)
    typer.echo(f"✅ User created: {user.name} <{user.email}> ({user.id})")


@user_app.command("list")
def user_list() -> None:
    """List registered users."""
    conn = get_connection()
    init_db(conn)

    try:
        users = list_users(conn)
    finally:
        conn.close()

    if not users:
        typer.echo("No users found.")
        return
    active_id = load_context().active_user_id
    for u in users:
        marker = "*" if u.id == active_id else " "
        typer.echo(f"{marker} {u.name} <{u.email}> \t[{u.id}]")


@user_app.command("switch")
def user_switch(
    email: str = typer.Argument(..., help="Email of the user to act as.")
) -> None:
    """Act as another registered user."""
    conn = get_connection()
    init_db(conn)

    try:
        user = get_user_by_email(conn, email)
    finally:
        conn.close()

    if user is None:
        typer.echo(f"❌ User '{email}' not found.")
        raise typer.Exit(code=1)

    ctx = load_context()
    ctx.active_user_id = user.id
    ctx.active_user_email = user.email
    ctx.active_project_id = None
    ctx.active_project_name = None
    save_context(ctx)
    typer.echo(f"👤 Acting as {user.name} <{user.email}>")


@user_app.command("whoami")
def user_whoami() -> None:
    """Show the active user."""
    ctx = load_context()
    if not ctx.active_user_id:
        typer.echo("No active user.")
        raise typer.Exit(code=1)
    typer.echo(f"{ctx.active_user_email} [{ctx.active_user_id}]")
