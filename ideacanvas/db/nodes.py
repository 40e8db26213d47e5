"""CRUD operations for the ``canvas_nodes`` table."""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import CanvasNode, NodeType
from ideacanvas.db.validation import (
    coerce_enum,
    dump_map,
    load_map,
    new_id,
    now,
    optional_text,
    require_number,
    require_positive,
    require_reference,
    require_text,
    touched,
)
from ideacanvas.errors import NotFoundError, ValidationError

# Field name -> validator returning the value to store.
_UPDATABLE = {
    "title": lambda v: require_text(v, "title"),
    "content": lambda v: optional_text(v, "content"),
    "position_x": lambda v: require_number(v, "position_x"),
    "position_y": lambda v: require_number(v, "position_y"),
    "width": lambda v: require_positive(v, "width"),
    "height": lambda v: require_positive(v, "height"),
    "style_data": lambda v: dump_map(v, "style_data"),
    "metadata": lambda v: dump_map(v, "metadata"),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_node(row: sqlite3.Row) -> CanvasNode:
    return CanvasNode(
        id=row["id"],
        project_id=row["project_id"],
        type=NodeType(row["type"]),
        title=row["title"],
        content=row["content"],
        position_x=row["position_x"],
        position_y=row["position_y"],
        width=row["width"],
        height=row["height"],
        style_data=load_map(row["style_data"]),
        metadata=load_map(row["metadata"]),
        created_by=row["created_by"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_node(
    conn: sqlite3.Connection,
    project_id: str,
    node_type: NodeType | str,
    title: str,
    position_x: float,
    position_y: float,
    width: float,
    height: float,
    created_by: str,
    content: Optional[str] = None,
    style_data: Optional[dict[str, Any]] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> CanvasNode:
    """Insert a new canvas node and return it.

    Args:
        conn: Open DB connection.
        project_id: Owning project.
        node_type: One of :class:`~ideacanvas.db.models.NodeType`.
        title: Display title, must not be empty.
        position_x: Canvas x coordinate (any sign).
        position_y: Canvas y coordinate (any sign).
        width: Strictly positive width.
        height: Strictly positive height.
        created_by: Id of the creating user.
        content: Optional body text.
        style_data: Arbitrary styling map stored as JSON.
        metadata: Arbitrary key/value map stored as JSON.

    Raises:
        ValidationError: Empty title, non-positive size or unknown type.
        InvalidReferenceError: Unknown project or creator.
    """
    kind = coerce_enum(NodeType, node_type, "type")
    title = require_text(title, "title")
    content = optional_text(content, "content")
    x = require_number(position_x, "position_x")
    y = require_number(position_y, "position_y")
    w = require_positive(width, "width")
    h = require_positive(height, "height")
    style_json = dump_map(style_data, "style_data")
    meta_json = dump_map(metadata, "metadata")
    nid = new_id()
    ts = now()
    with transaction(conn):
        require_reference(conn, "project", project_id)
        require_reference(conn, "user", created_by)
        conn.execute(
            """
            INSERT INTO canvas_nodes (
                id, project_id, type, title, content, position_x, position_y,
                width, height, style_data, metadata, created_by, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                nid, project_id, kind.value, title, content, x, y,
                w, h, style_json, meta_json, created_by, ts, ts,
            ),
        )
        node = get_node(conn, nid)

    logger.debug("Created {} node {} in project {}", kind.value, nid, project_id)
    return node  # type: ignore[return-value]


def get_node(conn: sqlite3.Connection, node_id: str) -> Optional[CanvasNode]:
    """Fetch a single node by id.  Returns ``None`` if not found."""
    row = conn.execute(
        "SELECT * FROM canvas_nodes WHERE id = ?", (node_id,)
    ).fetchone()
    return _row_to_node(row) if row else None


def update_node(conn: sqlite3.Connection, node_id: str, **fields: Any) -> CanvasNode:
    """Update one or more fields on a node.

    Allowed keyword arguments: ``title``, ``content``, ``position_x``,
    ``position_y``, ``width``, ``height``, ``style_data``, ``metadata``.
    A keyword that is absent leaves the column unchanged; a keyword passed as
    ``None`` clears a nullable column.  ``updated_at`` is always refreshed,
    even when no fields are given.

    Raises:
        NotFoundError: If ``node_id`` does not exist.
        ValidationError: Unknown field or a value that fails validation.
    """
    updates: dict[str, Any] = {}
    for key, value in fields.items():
        validator = _UPDATABLE.get(key)
        if validator is None:
            raise ValidationError(f"Cannot update field {key!r}", field=key)
        updates[key] = validator(value)

    with transaction(conn):
        node = get_node(conn, node_id)
        if node is None:
            raise NotFoundError("Canvas node", node_id)
        updates["updated_at"] = touched(node.updated_at)
        set_clause = ", ".join(f"{col} = ?" for col in updates)
        conn.execute(
            f"UPDATE canvas_nodes SET {set_clause} WHERE id = ?",  # noqa: S608
            [*updates.values(), node_id],
        )
        return get_node(conn, node_id)  # type: ignore[return-value]


def delete_node(conn: sqlite3.Connection, node_id: str) -> bool:
    """Delete a node together with its AI document, incident edges and comments.

    Returns:
        ``True`` if the node existed, ``False`` if this was a no-op.
    """
    with transaction(conn):
        conn.execute("DELETE FROM ai_documents WHERE node_id = ?", (node_id,))
        conn.execute(
            "DELETE FROM canvas_edges WHERE source_node_id = ? OR target_node_id = ?",
            (node_id, node_id),
        )
        conn.execute("DELETE FROM comments WHERE node_id = ?", (node_id,))
        cursor = conn.execute("DELETE FROM canvas_nodes WHERE id = ?", (node_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("Deleted node {}", node_id)
    return deleted


def list_nodes(conn: sqlite3.Connection, project_id: str) -> list[CanvasNode]:
    """Return every node on a project's canvas."""
    rows = conn.execute(
        "SELECT * FROM canvas_nodes WHERE project_id = ? ORDER BY created_at, rowid",
        (project_id,),
    ).fetchall()
    return [_row_to_node(r) for r in rows]
