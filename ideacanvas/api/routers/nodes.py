"""Canvas node endpoints.

Routes
------
POST   /projects/{project_id}/nodes   Create a node              (edit)
GET    /nodes/{node_id}               Fetch a node               (view)
PATCH  /nodes/{node_id}               Partial update             (edit)
DELETE /nodes/{node_id}               Delete with cascade        (edit)
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import DeleteResponse, NodeResponse
from ideacanvas.db.models import CanvasNode, NodeType, Permission, User, to_dict
from ideacanvas.db.nodes import create_node, delete_node, get_node, update_node
from ideacanvas.errors import NotFoundError

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class NodeCreate(BaseModel):
    type: NodeType
    title: str
    content: Optional[str] = None
    position_x: float
    position_y: float
    width: float
    height: float
    style_data: Optional[dict[str, Any]] = None
    metadata: Optional[dict[str, Any]] = None


class NodeUpdate(BaseModel):
    """Every field is optional; only fields sent by the client are applied."""

    title: Optional[str] = None
    content: Optional[str] = None
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    style_data: Optional[dict[str, Any]] = None
    metadata: Optional[dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def node_or_404(conn: sqlite3.Connection, node_id: str) -> CanvasNode:
    node = get_node(conn, node_id)
    if node is None:
        raise NotFoundError("Canvas node", node_id)
    return node


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/projects/{project_id}/nodes", response_model=NodeResponse, status_code=201)
def create(
    project_id: str,
    body: NodeCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Create a node on the project's canvas, attributed to the caller."""
    require_permission(conn, project_id, user.id, Permission.EDIT)
    node = create_node(
        conn,
        project_id=project_id,
        node_type=body.type,
        title=body.title,
        content=body.content,
        position_x=body.position_x,
        position_y=body.position_y,
        width=body.width,
        height=body.height,
        style_data=body.style_data,
        metadata=body.metadata,
        created_by=user.id,
    )
    return to_dict(node)


@router.get("/nodes/{node_id}", response_model=NodeResponse)
def get_one(
    node_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    node = node_or_404(conn, node_id)
    require_permission(conn, node.project_id, user.id, Permission.VIEW)
    return to_dict(node)


@router.patch("/nodes/{node_id}", response_model=NodeResponse)
def update(
    node_id: str,
    body: NodeUpdate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Apply a partial update; explicit ``null`` clears nullable fields."""
    node = node_or_404(conn, node_id)
    require_permission(conn, node.project_id, user.id, Permission.EDIT)
    updated = update_node(conn, node_id, **body.model_dump(exclude_unset=True))
    return to_dict(updated)


@router.delete("/nodes/{node_id}", response_model=DeleteResponse)
def remove(
    node_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, bool]:
    """Delete a node, its AI document, incident edges and anchored comments."""
    node = get_node(conn, node_id)
    if node is None:
        return {"success": False}
    require_permission(conn, node.project_id, user.id, Permission.EDIT)
    return {"success": delete_node(conn, node_id)}
