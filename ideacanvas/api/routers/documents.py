"""AI document endpoints.

Routes
------
POST /nodes/{node_id}/ai-document          Start a document (status=generating)  (edit)
GET  /nodes/{node_id}/ai-document          The node's document                   (view)
POST /ai-documents/{document_id}/complete  Worker: generating -> completed       (edit)
POST /ai-documents/{document_id}/fail      Worker: generating -> failed          (edit)
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.access import require_permission
from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.routers.nodes import node_or_404
from ideacanvas.api.schemas import AiDocumentResponse
from ideacanvas.db.ai_documents import (
    complete_document,
    create_document,
    fail_document,
    get_document,
    get_document_by_node,
)
from ideacanvas.db.models import DocumentType, Permission, User, to_dict
from ideacanvas.db.nodes import get_node
from ideacanvas.errors import InvalidReferenceError

router = APIRouter()


class AiDocumentCreate(BaseModel):
    document_type: DocumentType
    prompt: str


class CompleteRequest(BaseModel):
    generated_content: str


class FailRequest(BaseModel):
    reason: Optional[str] = None


def _authorize_document(conn: sqlite3.Connection, document_id: str, user: User) -> None:
    document = get_document(conn, document_id)
    node = node_or_404(conn, document.node_id)
    require_permission(conn, node.project_id, user.id, Permission.EDIT)


@router.post("/nodes/{node_id}/ai-document", response_model=AiDocumentResponse, status_code=201)
def create(
    node_id: str,
    body: AiDocumentCreate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Attach the node's single AI document; a second attempt is a 409."""
    node = get_node(conn, node_id)
    if node is None:
        raise InvalidReferenceError("node", node_id)
    require_permission(conn, node.project_id, user.id, Permission.EDIT)
    document = create_document(conn, node_id=node_id, document_type=body.document_type, prompt=body.prompt)
    return to_dict(document)


@router.get("/nodes/{node_id}/ai-document", response_model=AiDocumentResponse)
def get_for_node(
    node_id: str,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    node = node_or_404(conn, node_id)
    require_permission(conn, node.project_id, user.id, Permission.VIEW)
    return to_dict(get_document_by_node(conn, node_id))


@router.post("/ai-documents/{document_id}/complete", response_model=AiDocumentResponse)
def complete(
    document_id: str,
    body: CompleteRequest,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    _authorize_document(conn, document_id, user)
    return to_dict(complete_document(conn, document_id, body.generated_content))


@router.post("/ai-documents/{document_id}/fail", response_model=AiDocumentResponse)
def fail(
    document_id: str,
    body: FailRequest,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    _authorize_document(conn, document_id, user)
    return to_dict(fail_document(conn, document_id, body.reason))
