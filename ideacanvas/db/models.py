"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.  ``style_data`` and ``metadata`` are
opaque JSON maps and are never interpreted by the stores.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Optional


class NodeType(str, enum.Enum):
    TEXT = "text"
    AI_DOCUMENT = "ai_document"
    AI_BRAINSTORM = "ai_brainstorm"
    MEDIA = "media"
    CUSTOM = "custom"


class DocumentType(str, enum.Enum):
    PROJECT_BRIEF = "project_brief"
    PRD = "prd"
    LEAN_CANVAS = "lean_canvas"
    OTHER = "other"


class DocumentStatus(str, enum.Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class Permission(str, enum.Enum):
    """Share tiers, ordered ``view < comment < edit``."""

    VIEW = "view"
    COMMENT = "comment"
    EDIT = "edit"

    @property
    def rank(self) -> int:
        return _PERMISSION_RANK[self]

    def allows(self, required: "Permission") -> bool:
        return self.rank >= required.rank


_PERMISSION_RANK = {Permission.VIEW: 1, Permission.COMMENT: 2, Permission.EDIT: 3}


@dataclass
class User:
    id: str
    email: str
    name: str
    avatar_url: Optional[str]
    created_at: float
    updated_at: float


@dataclass
class Project:
    id: str
    name: str
    description: Optional[str]
    owner_id: str
    created_at: float
    updated_at: float


@dataclass
class CanvasNode:
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


@dataclass
class CanvasEdge:
    id: str
    project_id: str
    source_node_id: str
    target_node_id: str
    style_data: Optional[dict[str, Any]]
    created_at: float


@dataclass
class AiDocument:
    id: str
    node_id: str
    document_type: DocumentType
    prompt: str
    generated_content: str
    status: DocumentStatus
    failure_reason: Optional[str]
    created_at: float
    updated_at: float


@dataclass
class ProjectShare:
    id: str
    project_id: str
    shared_with_user_id: str
    permission: Permission
    created_by: str
    created_at: float


@dataclass
class Comment:
    id: str
    project_id: str
    node_id: Optional[str]
    content: str
    position_x: Optional[float]
    position_y: Optional[float]
    author_id: str
    created_at: float
    updated_at: float


@dataclass
class CanvasPayload:
    nodes: list[CanvasNode] = field(default_factory=list)
    edges: list[CanvasEdge] = field(default_factory=list)


def to_dict(obj: Any) -> dict[str, Any]:
    """Convert a model to a plain dict with enum members reduced to their values."""
    return {
        key: value.value if isinstance(value, enum.Enum) else value
        for key, value in asdict(obj).items()
    }
