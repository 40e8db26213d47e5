"""Operations on the ``canvas_edges`` table.

Edges are directed and may form cycles (self-loops included); the only
structural rule is that both endpoints live in the edge's own project.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import CanvasEdge, CanvasPayload
from ideacanvas.db.nodes import list_nodes
from ideacanvas.db.validation import (
    dump_map,
    load_map,
    new_id,
    now,
    require_node_in_project,
    require_reference,
)


def _row_to_edge(row: sqlite3.Row) -> CanvasEdge:
    return CanvasEdge(
        id=row["id"],
        project_id=row["project_id"],
        source_node_id=row["source_node_id"],
        target_node_id=row["target_node_id"],
        style_data=load_map(row["style_data"]),
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_edge(
    conn: sqlite3.Connection,
    project_id: str,
    source_node_id: str,
    target_node_id: str,
    style_data: Optional[dict[str, Any]] = None,
) -> CanvasEdge:
    """Create a directed edge from *source* to *target* inside *project_id*.

    Raises:
        InvalidReferenceError: The project or either node is missing, or a
            node belongs to another project.
    """
    style_json = dump_map(style_data, "style_data")
    eid = new_id()
    with transaction(conn):
        require_reference(conn, "project", project_id)
        require_node_in_project(conn, source_node_id, project_id)
        require_node_in_project(conn, target_node_id, project_id)
        conn.execute(
            """
            INSERT INTO canvas_edges (id, project_id, source_node_id, target_node_id, style_data, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (eid, project_id, source_node_id, target_node_id, style_json, now()),
        )
        edge = get_edge(conn, eid)

    logger.debug("Connected {} -> {} with edge {}", source_node_id, target_node_id, eid)
    return edge  # type: ignore[return-value]


def get_edge(conn: sqlite3.Connection, edge_id: str) -> Optional[CanvasEdge]:
    row = conn.execute("SELECT * FROM canvas_edges WHERE id = ?", (edge_id,)).fetchone()
    return _row_to_edge(row) if row else None


def delete_edge(conn: sqlite3.Connection, edge_id: str) -> bool:
    """Delete an edge.  Returns ``False`` when there was nothing to delete."""
    with transaction(conn):
        cursor = conn.execute("DELETE FROM canvas_edges WHERE id = ?", (edge_id,))
    return cursor.rowcount > 0


def list_edges(conn: sqlite3.Connection, project_id: str) -> list[CanvasEdge]:
    """Return every edge of a project's canvas."""
    rows = conn.execute(
        "SELECT * FROM canvas_edges WHERE project_id = ? ORDER BY created_at, rowid",
        (project_id,),
    ).fetchall()
    return [_row_to_edge(r) for r in rows]


def get_canvas(conn: sqlite3.Connection, project_id: str) -> CanvasPayload:
    """Return all nodes and edges of a project for canvas rendering.

    An unknown project yields empty collections.
    """
    return CanvasPayload(nodes=list_nodes(conn, project_id), edges=list_edges(conn, project_id))
