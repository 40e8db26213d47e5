"""Project sharing endpoints.

Routes
------
GET    /projects/{project_id}/shares   List grants      (view)
POST   /projects/{project_id}/shares   Grant access     (edit)
DELETE /shares/{share_id}              Revoke a grant   (edit)
"""

from __future__ import annotations

import sqlite3
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import DeleteResponse, ShareResponse
from ideacanvas.db.models import Permission, User, to_dict
from ideacanvas.db.shares import create_share, delete_share, get_share, list_shares

router = APIRouter()


class ShareCreate(BaseModel):
    shared_with_user_id: str
    permission: Permission


@router.get("/projects/{project_id}/shares", response_model=list[ShareResponse])
def list_for_project(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[dict[str, Any]]:
    require_permission(conn, project_id, user.id, Permission.VIEW)
    return [to_dict(s) for s in list_shares(conn, project_id)]


@router.post("/projects/{project_id}/shares", response_model=ShareResponse, status_code=201)
def create(
    project_id: str,
    body: ShareCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    require_permission(conn, project_id, user.id, Permission.EDIT)
    share = create_share(
        conn,
        project_id=project_id,
        shared_with_user_id=body.shared_with_user_id,
        permission=body.permission,
        created_by=user.id,
    )
    return to_dict(share)


@router.delete("/shares/{share_id}", response_model=DeleteResponse)
def remove(
    share_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, bool]:
    """Revoke a share.  Reports success even for an unknown id."""
    share = get_share(conn, share_id)
    if share is not None:
        require_permission(conn, share.project_id, user.id, Permission.EDIT)
    return {"success": delete_share(conn, share_id)}
