"""Project share store.

A share grants a non-owner user ``view``, ``comment`` or ``edit`` access to a
project.  Nothing stops several rows for the same (project, user) pair; the
access layer resolves them by taking the highest tier.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import Permission, ProjectShare
from ideacanvas.db.validation import coerce_enum, new_id, now, require_reference


def _row_to_share(row: sqlite3.Row) -> ProjectShare:
    return ProjectShare(
        id=row["id"],
        project_id=row["project_id"],
        shared_with_user_id=row["shared_with_user_id"],
        permission=Permission(row["permission"]),
        created_by=row["created_by"],
        created_at=row["created_at"],
    )


def create_share(
    conn: sqlite3.Connection,
    project_id: str,
    shared_with_user_id: str,
    permission: Permission | str,
    created_by: str,
) -> ProjectShare:
    """Grant *permission* on *project_id* to *shared_with_user_id*.

    Raises:
        ValidationError: Unknown permission tier.
        InvalidReferenceError: Unknown project, grantee or granting user.
    """
    tier = coerce_enum(Permission, permission, "permission")
    sid = new_id()
    with transaction(conn):
        require_reference(conn, "project", project_id)
        require_reference(conn, "user", shared_with_user_id)
        require_reference(conn, "user", created_by)
        conn.execute(
            """
            INSERT INTO project_shares (id, project_id, shared_with_user_id, permission, created_by, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (sid, project_id, shared_with_user_id, tier.value, created_by, now()),
        )
        share = get_share(conn, sid)

    logger.info("Shared project {} with {} ({})", project_id, shared_with_user_id, tier.value)
    return share  # type: ignore[return-value]


def get_share(conn: sqlite3.Connection, share_id: str) -> Optional[ProjectShare]:
    row = conn.execute("SELECT * FROM project_shares WHERE id = ?", (share_id,)).fetchone()
    return _row_to_share(row) if row else None


def list_shares(conn: sqlite3.Connection, project_id: str) -> list[ProjectShare]:
    rows = conn.execute(
        "SELECT * FROM project_shares WHERE project_id = ? ORDER BY created_at, rowid",
        (project_id,),
    ).fetchall()
    return [_row_to_share(r) for r in rows]


def list_user_shares(
    conn: sqlite3.Connection, project_id: str, user_id: str
) -> list[ProjectShare]:
    rows = conn.execute(
        "SELECT * FROM project_shares WHERE project_id = ? AND shared_with_user_id = ?",
        (project_id, user_id),
    ).fetchall()
    return [_row_to_share(r) for r in rows]


def delete_share(conn: sqlite3.Connection, share_id: str) -> bool:
    """Revoke a share.  Always reports success, even if nothing was removed."""
    with transaction(conn):
        conn.execute("DELETE FROM project_shares WHERE id = ?", (share_id,))
    return True
