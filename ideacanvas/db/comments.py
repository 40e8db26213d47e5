"""Comment store.

Comments belong to a project and may be anchored to a node and/or a canvas
position.  Position fields are independent of ``node_id``.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import Comment
from ideacanvas.db.validation import (
    new_id,
    now,
    optional_number,
    require_node_in_project,
    require_reference,
    require_text,
)


def _row_to_comment(row: sqlite3.Row) -> Comment:
    return Comment(
        id=row["id"],
        project_id=row["project_id"],
        node_id=row["node_id"],
        content=row["content"],
        position_x=row["position_x"],
        position_y=row["position_y"],
        author_id=row["author_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_comment(
    conn: sqlite3.Connection,
    project_id: str,
    content: str,
    author_id: str,
    node_id: Optional[str] = None,
    position_x: Optional[float] = None,
    position_y: Optional[float] = None,
) -> Comment:
    """Post a comment on a project, optionally anchored to a node.

    Raises:
        ValidationError: Empty content or non-numeric position.
        InvalidReferenceError: Unknown project, node or author, or a node that
            belongs to another project.
    """
    content = require_text(content, "content")
    x = optional_number(position_x, "position_x")
    y = optional_number(position_y, "position_y")
    cid = new_id()
    ts = now()
    with transaction(conn):
        require_reference(conn, "project", project_id)
        require_reference(conn, "user", author_id)
        if node_id is not None:
            require_node_in_project(conn, node_id, project_id)
        conn.execute(
            """
            INSERT INTO comments (
                id, project_id, node_id, content, position_x, position_y,
                author_id, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (cid, project_id, node_id, content, x, y, author_id, ts, ts),
        )
        comment = get_comment(conn, cid)

    logger.debug("Comment {} posted on project {} by {}", cid, project_id, author_id)
    return comment  # type: ignore[return-value]


def get_comment(conn: sqlite3.Connection, comment_id: str) -> Optional[Comment]:
    row = conn.execute("SELECT * FROM comments WHERE id = ?", (comment_id,)).fetchone()
    return _row_to_comment(row) if row else None


def list_comments(conn: sqlite3.Connection, project_id: str) -> list[Comment]:
    """Return project-level and node-anchored comments alike."""
    rows = conn.execute(
        "SELECT * FROM comments WHERE project_id = ? ORDER BY created_at, rowid",
        (project_id,),
    ).fetchall()
    return [_row_to_comment(r) for r in rows]


def delete_comment(conn: sqlite3.Connection, comment_id: str) -> bool:
    """Delete a comment.  Always reports success, even if nothing was removed."""
    with transaction(conn):
        conn.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
    return True
