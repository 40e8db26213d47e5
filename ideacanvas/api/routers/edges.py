"""Canvas edge endpoints.

Routes
------
POST   /projects/{project_id}/edges   Connect two nodes of the project  (edit)
DELETE /edges/{edge_id}               Remove an edge                    (edit)
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import DeleteResponse, EdgeResponse
from ideacanvas.db.edges import create_edge, delete_edge, get_edge
from ideacanvas.db.models import Permission, User, to_dict

router = APIRouter()


class EdgeCreate(BaseModel):
    source_node_id: str
    target_node_id: str
    style_data: Optional[dict[str, Any]] = None


@router.post("/projects/{project_id}/edges", response_model=EdgeResponse, status_code=201)
def create(
    project_id: str,
    body: EdgeCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    require_permission(conn, project_id, user.id, Permission.EDIT)
    edge = create_edge(
        conn,
        project_id=project_id,
        source_node_id=body.source_node_id,
        target_node_id=body.target_node_id,
        style_data=body.style_data,
    )
    return to_dict(edge)


@router.delete("/edges/{edge_id}", response_model=DeleteResponse)
def remove(
    edge_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, bool]:
    """Delete an edge; an unknown id reports ``success: false``."""
    edge = get_edge(conn, edge_id)
    if edge is None:
        return {"success": False}
    require_permission(conn, edge.project_id, user.id, Permission.EDIT)
    return {"success": delete_edge(conn, edge_id)}
