"""Typed error taxonomy shared by the stores, the access layer and the API.

Every failure a caller can observe is one of these.  The HTTP layer maps each
class to a status code in :mod:`ideacanvas.api.errors`.
"""

from __future__ import annotations

from typing import Optional


class CanvasError(Exception):
    """Base exception for all Idea Canvas errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(CanvasError):
    """Malformed input: empty title, non-positive dimension, unknown enum value."""

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, detail)
        self.field = field


class InvalidReferenceError(CanvasError):
    """A referenced project, node or user does not resolve."""

    def __init__(self, entity: str, entity_id: Optional[str], detail: Optional[str] = None):
        super().__init__(f"Referenced {entity} does not exist: {entity_id!r}", detail)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(CanvasError):
    """A uniqueness rule would be violated."""


class InvalidTransitionError(ConflictError):
    """An AI document state change that the state machine does not allow."""

    def __init__(self, document_id: str, current: str, target: str):
        super().__init__(
            f"AI document {document_id!r} cannot move from {current!r} to {target!r}"
        )
        self.document_id = document_id
        self.current = current
        self.target = target


class NotFoundError(CanvasError):
    """Lookup, update or get on an id that does not exist."""

    def __init__(self, entity: str, entity_id: str, detail: Optional[str] = None):
        super().__init__(f"{entity} not found: {entity_id!r}", detail)
        self.entity = entity
        self.entity_id = entity_id


class ForbiddenError(CanvasError):
    """The caller's permission on the project is below the required tier."""


class AuthenticationError(CanvasError):
    """No verified identity could be resolved for the request."""

    def __init__(self, message: str = "Authentication required", detail: Optional[str] = None):
        super().__init__(message, detail)
