"""Project endpoints.

Routes
------
GET    /projects                   Projects the caller owns or has been shared
POST   /projects                   Create a project owned by the caller
GET    /projects/{id}              Project details              (view)
PATCH  /projects/{id}              Rename / re-describe         (edit)
DELETE /projects/{id}              Delete with full cascade     (owner)
GET    /projects/{id}/canvas       Nodes + edges for rendering  (view)
GET    /projects/{id}/export       Whole project as JSON        (view)
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_owner, require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import CanvasResponse, DeleteResponse, ProjectResponse
from ideacanvas.db.edges import get_canvas
from ideacanvas.db.models import Permission, User, to_dict
from ideacanvas.db.projects import (
    create_project,
    delete_project,
    export_project,
    find_project,
    get_project,
    get_user_projects,
    update_project,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[ProjectResponse])
def list_mine(
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[dict[str, Any]]:
    """Return the deduplicated union of owned and shared projects."""
    return [to_dict(p) for p in get_user_projects(conn, user.id)]


@router.post("", response_model=ProjectResponse, status_code=201)
def create(
    body: ProjectCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    project = create_project(conn, name=body.name, owner_id=user.id, description=body.description)
    return to_dict(project)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_one(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    require_permission(conn, project_id, user.id, Permission.VIEW)
    return to_dict(get_project(conn, project_id))


@router.patch("/{project_id}", response_model=ProjectResponse)
def update(
    project_id: str,
    body: ProjectUpdate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Apply only the fields present in the request body."""
    require_permission(conn, project_id, user.id, Permission.EDIT)
    project = update_project(conn, project_id, **body.model_dump(exclude_unset=True))
    return to_dict(project)


@router.delete("/{project_id}", response_model=DeleteResponse)
def remove(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, bool]:
    """Delete a project and everything on its canvas.  Owner only."""
    if find_project(conn, project_id) is None:
        return {"success": False}
    require_owner(conn, project_id, user.id)
    return {"success": delete_project(conn, project_id)}


@router.get("/{project_id}/canvas", response_model=CanvasResponse)
def canvas(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    require_permission(conn, project_id, user.id, Permission.VIEW)
    payload = get_canvas(conn, project_id)
    return {
        "nodes": [to_dict(n) for n in payload.nodes],
        "edges": [to_dict(e) for e in payload.edges],
    }


@router.get("/{project_id}/export", response_model=dict[str, Any])
def export(
    project_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Serialise the full project (canvas, documents, comments, shares) to JSON."""
    require_permission(conn, project_id, user.id, Permission.VIEW)
    return export_project(conn, project_id)
