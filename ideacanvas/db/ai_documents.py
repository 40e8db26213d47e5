"""AI document store and its generation state machine.

Each canvas node carries at most one AI document.  A document is born in
``generating`` and may move exactly once, to ``completed`` or ``failed``::

    (none) --create--> generating --complete--> completed
                       generating --fail------> failed

Both end states are terminal.  The generation itself happens in an external
worker that calls :func:`complete_document` or :func:`fail_document`; a
failed document is never retried in place.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import AiDocument, DocumentStatus, DocumentType
from ideacanvas.db.validation import (
    coerce_enum,
    new_id,
    now,
    optional_text,
    require_reference,
    require_text,
    touched,
)
from ideacanvas.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError

# Legal transitions: current status -> statuses it may move to.
TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.GENERATING: frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED}),
    DocumentStatus.COMPLETED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


def _row_to_document(row: sqlite3.Row) -> AiDocument:
    return AiDocument(
        id=row["id"],
        node_id=row["node_id"],
        document_type=DocumentType(row["document_type"]),
        prompt=row["prompt"],
        generated_content=row["generated_content"],
        status=DocumentStatus(row["status"]),
        failure_reason=row["failure_reason"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _has_document(conn: sqlite3.Connection, node_id: str) -> bool:
    row = conn.execute("SELECT 1 FROM ai_documents WHERE node_id = ?", (node_id,)).fetchone()
    return row is not None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_document(
    conn: sqlite3.Connection,
    node_id: str,
    document_type: DocumentType | str,
    prompt: str,
) -> AiDocument:
    """Attach a new AI document to *node_id* in the ``generating`` state.

    The prompt is stored verbatim.

    Raises:
        ValidationError: Empty prompt or unknown document type.
        InvalidReferenceError: The node does not exist.
        ConflictError: The node already has a document.
    """
    kind = coerce_enum(DocumentType, document_type, "document_type")
    prompt = require_text(prompt, "prompt")
    did = new_id()
    ts = now()
    try:
        with transaction(conn):
            require_reference(conn, "node", node_id)
            if _has_document(conn, node_id):
                raise ConflictError(f"Canvas node {node_id!r} already has an AI document")
            conn.execute(
                """
                INSERT INTO ai_documents (
                    id, node_id, document_type, prompt, generated_content, status,
                    failure_reason, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, '', ?, NULL, ?, ?)
                """,
                (did, node_id, kind.value, prompt, DocumentStatus.GENERATING.value, ts, ts),
            )
            document = get_document(conn, did)
    except sqlite3.IntegrityError as exc:
        # UNIQUE(node_id) backs up the pre-check.
        raise ConflictError(f"Canvas node {node_id!r} already has an AI document") from exc

    logger.info("AI document {} ({}) generating for node {}", did, kind.value, node_id)
    return document


def find_document(conn: sqlite3.Connection, document_id: str) -> Optional[AiDocument]:
    row = conn.execute("SELECT * FROM ai_documents WHERE id = ?", (document_id,)).fetchone()
    return _row_to_document(row) if row else None


def get_document(conn: sqlite3.Connection, document_id: str) -> AiDocument:
    document = find_document(conn, document_id)
    if document is None:
        raise NotFoundError("AI document", document_id)
    return document


def get_document_by_node(conn: sqlite3.Connection, node_id: str) -> AiDocument:
    """Return the node's AI document or raise :class:`NotFoundError`."""
    row = conn.execute("SELECT * FROM ai_documents WHERE node_id = ?", (node_id,)).fetchone()
    if row is None:
        raise NotFoundError("AI document for node", node_id)
    return _row_to_document(row)


def list_project_documents(conn: sqlite3.Connection, project_id: str) -> list[AiDocument]:
    rows = conn.execute(
        """
        SELECT d.* FROM ai_documents d
        JOIN canvas_nodes n ON n.id = d.node_id
        WHERE n.project_id = ?
        ORDER BY d.created_at, d.rowid
        """,
        (project_id,),
    ).fetchall()
    return [_row_to_document(r) for r in rows]


def _transition(
    conn: sqlite3.Connection,
    document_id: str,
    target: DocumentStatus,
    generated_content: Optional[str] = None,
    failure_reason: Optional[str] = None,
) -> AiDocument:
    with transaction(conn):
        document = get_document(conn, document_id)
        if target not in TRANSITIONS[document.status]:
            raise InvalidTransitionError(document_id, document.status.value, target.value)
        conn.execute(
            """
            UPDATE ai_documents
            SET status = ?, generated_content = COALESCE(?, generated_content),
                failure_reason = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                target.value,
                generated_content,
                failure_reason,
                touched(document.updated_at),
                document_id,
            ),
        )
        updated = get_document(conn, document_id)

    logger.info("AI document {} moved {} -> {}", document_id, document.status.value, target.value)
    return updated


def complete_document(conn: sqlite3.Connection, document_id: str, generated_content: str) -> AiDocument:
    """Record the worker's output and move ``generating -> completed``."""
    if not isinstance(generated_content, str):
        raise ValidationError("must be a string", field="generated_content")
    return _transition(conn, document_id, DocumentStatus.COMPLETED, generated_content=generated_content)


def fail_document(conn: sqlite3.Connection, document_id: str, reason: Optional[str] = None) -> AiDocument:
    """Move ``generating -> failed``, keeping *reason* for later inspection."""
    reason = optional_text(reason, "reason")
    return _transition(conn, document_id, DocumentStatus.FAILED, failure_reason=reason)
