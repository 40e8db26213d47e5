"""Access control for project canvases.

A user's effective permission on a project is:

* ``edit`` if they own it (share rows are not consulted),
* otherwise the highest tier among their share rows (``view < comment < edit``),
* otherwise nothing.

The HTTP routers call :func:`require_permission` before touching a store.
A project that does not exist is reported as forbidden, so callers without
access cannot discover which project ids are real.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from loguru import logger

from ideacanvas.db.models import Permission, Project
from ideacanvas.db.projects import find_project
from ideacanvas.db.shares import list_user_shares
from ideacanvas.errors import ForbiddenError


def effective_permission(
    conn: sqlite3.Connection, project_id: str, user_id: str
) -> Optional[Permission]:
    """Return the user's permission on the project, or ``None`` for no access."""
    project = find_project(conn, project_id)
    if project is None:
        return None
    if project.owner_id == user_id:
        return Permission.EDIT

    shares = list_user_shares(conn, project_id, user_id)
    if not shares:
        return None
    return max((s.permission for s in shares), key=lambda p: p.rank)


def require_permission(
    conn: sqlite3.Connection,
    project_id: str,
    user_id: str,
    minimum: Permission,
) -> Permission:
    """Return the effective permission, or raise :class:`ForbiddenError` below *minimum*."""
    granted = effective_permission(conn, project_id, user_id)
    if granted is None or not granted.allows(minimum):
        logger.warning(
            "Denied {} access to project {} for user {} (has {})",
            minimum.value,
            project_id,
            user_id,
            granted.value if granted else "none",
        )
        raise ForbiddenError(
            f"User {user_id!r} lacks {minimum.value!r} permission on project {project_id!r}"
        )
    return granted


def require_owner(conn: sqlite3.Connection, project_id: str, user_id: str) -> Project:
    """Return the project if *user_id* owns it, else raise :class:`ForbiddenError`."""
    project = find_project(conn, project_id)
    if project is None or project.owner_id != user_id:
        raise ForbiddenError(f"Only the owner may do this on project {project_id!r}")
    return project

