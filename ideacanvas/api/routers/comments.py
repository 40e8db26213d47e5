"""Comment endpoints.

Routes
------
GET    /projects/{project_id}/comments   All comments of a project     (view)
POST   /projects/{project_id}/comments   Post a comment                (comment)
DELETE /comments/{comment_id}            Delete; authors may delete their own
                                         with ``comment``, others need ``edit``
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import CommentResponse, DeleteResponse
from ideacanvas.db.comments import create_comment, delete_comment, get_comment, list_comments
from ideacanvas.db.models import Permission, User, to_dict

router = APIRouter()


class CommentCreate(BaseModel):
    content: str
    node_id: Optional[str] = None
    position_x: Optional[float] = None
    position_y: Optional[float] = None


@router.get("/projects/{project_id}/comments", response_model=list[CommentResponse])
def list_for_project(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[dict[str, Any]]:
    require_permission(conn, project_id, user.id, Permission.VIEW)
    return [to_dict(c) for c in list_comments(conn, project_id)]


@router.post("/projects/{project_id}/comments", response_model=CommentResponse, status_code=201)
def create(
    project_id: str,
    body: CommentCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    require_permission(conn, project_id, user.id, Permission.COMMENT)
    comment = create_comment(
        conn,
        project_id=project_id,
        content=body.content,
        author_id=user.id,
        node_id=body.node_id,
        position_x=body.position_x,
        position_y=body.position_y,
    )
    return to_dict(comment)


@router.delete("/comments/{comment_id}", response_model=DeleteResponse)
def remove(
    comment_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, bool]:
    comment = get_comment(conn, comment_id)
    if comment is not None:
        minimum = Permission.COMMENT if comment.author_id == user.id else Permission.EDIT
        require_permission(conn, comment.project_id, user.id, minimum)
    return {"success": delete_comment(conn, comment_id)}
