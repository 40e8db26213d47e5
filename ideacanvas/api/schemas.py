"""Pydantic response schemas shared across routers.

Request bodies live next to the endpoint that accepts them.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ideacanvas.db.models import DocumentStatus, DocumentType, NodeType, Permission


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    avatar_url: Optional[str]
    created_at: float
    updated_at: float


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    owner_id: str
    created_at: float
    updated_at: float


class NodeResponse(BaseModel):
    id: str
    project_id: str
    type: NodeType
    title: str
    content: Optional[str]
    position_x: float
    position_y: float
    width: float
    height: float
    style_data: Optional[dict[str, Any]]
    metadata: Optional[dict[str, Any]]
    created_by: str
    created_at: float
    updated_at: float


class EdgeResponse(BaseModel):
    id: str
    project_id: str
    source_node_id: str
    target_node_id: str
    style_data: Optional[dict[str, Any]]
    created_at: float


class CanvasResponse(BaseModel):
    nodes: list[NodeResponse]
    edges: list[EdgeResponse]


class AiDocumentResponse(BaseModel):
    id: str
    node_id: str
    document_type: DocumentType
    prompt: str
    generated_content: str
    status: DocumentStatus
    failure_reason: Optional[str]
    created_at: float
    updated_at: float


class ShareResponse(BaseModel):
    id: str
    project_id: str
    shared_with_user_id: str
    permission: Permission
    created_by: str
    created_at: float


class CommentResponse(BaseModel):
    id: str
    project_id: str
    node_id: Optional[str]
    content: str
    position_x: Optional[float]
    position_y: Optional[float]
    author_id: str
    created_at: float
    updated_at: float


class DeleteResponse(BaseModel):
    success: bool
