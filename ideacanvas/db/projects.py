"""Project store.

A Project is the root of the ownership graph: it exclusively owns its canvas
nodes, edges, shares and comments (and, through the nodes, their AI
documents).  Deleting a project removes all of them in one transaction.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from loguru import logger

from ideacanvas.db.ai_documents import list_project_documents
from ideacanvas.db.comments import list_comments
from ideacanvas.db.connection import transaction
from ideacanvas.db.edges import list_edges
from ideacanvas.db.models import Project, to_dict
from ideacanvas.db.nodes import list_nodes
from ideacanvas.db.shares import list_shares
from ideacanvas.db.validation import (
    new_id,
    now,
    optional_text,
    require_reference,
    require_text,
    touched,
)
from ideacanvas.errors import NotFoundError, ValidationError


def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        owner_id=row["owner_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_project(
    conn: sqlite3.Connection,
    name: str,
    owner_id: str,
    description: Optional[str] = None,
) -> Project:
    """Create a project owned by *owner_id*.

    Raises:
        ValidationError: If ``name`` is empty.
        InvalidReferenceError: If the owner does not exist.
    """
    name = require_text(name, "name")
    description = optional_text(description, "description")
    pid = new_id()
    ts = now()
    with transaction(conn):
        require_reference(conn, "user", owner_id)
        conn.execute(
            """
            INSERT INTO projects (id, name, description, owner_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (pid, name, description, owner_id, ts, ts),
        )
        project = get_project(conn, pid)

    logger.info("Created project {} ({!r}) for owner {}", pid, name, owner_id)
    return project


def find_project(conn: sqlite3.Connection, project_id: str) -> Optional[Project]:
    """Fetch a project by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
    return _row_to_project(row) if row else None


def get_project(conn: sqlite3.Connection, project_id: str) -> Project:
    """Fetch a project by id, raising :class:`NotFoundError` if absent."""
    project = find_project(conn, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def update_project(conn: sqlite3.Connection, project_id: str, **fields: Any) -> Project:
    """Update ``name`` and/or ``description``.

    Only keys actually passed are touched; ``description=None`` clears the
    description.  ``updated_at`` is always refreshed.
    """
    updates: dict[str, Any] = {}
    for key, value in fields.items():
        if key == "name":
            updates["name"] = require_text(value, "name")
        elif key == "description":
            updates["description"] = optional_text(value, "description")
        else:
            raise ValidationError(f"Cannot update field {key!r}", field=key)

    with transaction(conn):
        project = get_project(conn, project_id)
        updates["updated_at"] = touched(project.updated_at)
        set_clause = ", ".join(f"{col} = ?" for col in updates)
        conn.execute(
            f"UPDATE projects SET {set_clause} WHERE id = ?",  # noqa: S608
            [*updates.values(), project_id],
        )
        return get_project(conn, project_id)


def delete_project(conn: sqlite3.Connection, project_id: str) -> bool:
    """Delete a project and everything it owns.

    Children are removed first and the project row last, all inside a single
    transaction.

    Returns:
        ``True`` if the project existed, ``False`` for a no-op.
    """
    with transaction(conn):
        conn.execute(
            """
            DELETE FROM ai_documents
            WHERE node_id IN (SELECT id FROM canvas_nodes WHERE project_id = ?)
            """,
            (project_id,),
        )
        conn.execute("DELETE FROM comments WHERE project_id = ?", (project_id,))
        conn.execute("DELETE FROM canvas_edges WHERE project_id = ?", (project_id,))
        conn.execute("DELETE FROM project_shares WHERE project_id = ?", (project_id,))
        conn.execute("DELETE FROM canvas_nodes WHERE project_id = ?", (project_id,))
        cursor = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.info("Deleted project {} and its canvas", project_id)
    return deleted


def list_owned_projects(conn: sqlite3.Connection, owner_id: str) -> List[Project]:
    rows = conn.execute(
        "SELECT * FROM projects WHERE owner_id = ? ORDER BY created_at, rowid", (owner_id,)
    ).fetchall()
    return [_row_to_project(r) for r in rows]


def get_user_projects(conn: sqlite3.Connection, user_id: str) -> List[Project]:
    """Projects the user owns or has any share on, each listed once."""
    rows = conn.execute(
        """
        SELECT p.*
        FROM projects p
        WHERE p.owner_id = ?
           OR p.id IN (SELECT project_id FROM project_shares WHERE shared_with_user_id = ?)
        ORDER BY p.created_at, p.rowid
        """,
        (user_id, user_id),
    ).fetchall()
    return [_row_to_project(r) for r in rows]


def export_project(conn: sqlite3.Connection, project_id: str) -> Dict[str, Any]:
    """Serialise a project and its whole canvas to a JSON-ready dict."""
    project = get_project(conn, project_id)
    return {
        "project": to_dict(project),
        "nodes": [to_dict(n) for n in list_nodes(conn, project_id)],
        "edges": [to_dict(e) for e in list_edges(conn, project_id)],
        "ai_documents": [to_dict(d) for d in list_project_documents(conn, project_id)],
        "comments": [to_dict(c) for c in list_comments(conn, project_id)],
        "shares": [to_dict(s) for s in list_shares(conn, project_id)],
    }
