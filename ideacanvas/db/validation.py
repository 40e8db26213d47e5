"""Input validation and row plumbing shared by every store module."""

from __future__ import annotations

import enum
import json
import math
import sqlite3
import uuid
from time import time
from typing import Any, Optional, TypeVar

from ideacanvas.errors import InvalidReferenceError, ValidationError

E = TypeVar("E", bound=enum.Enum)

# Tables a reference may point at, keyed by the entity name used in errors.
_REFERENCE_TABLES = {
    "user": "users",
    "project": "projects",
    "node": "canvas_nodes",
}


# ---------------------------------------------------------------------------
# Ids and timestamps
# ---------------------------------------------------------------------------

def new_id() -> str:
    return str(uuid.uuid4())


def now() -> float:
    return time()


def touched(previous: float) -> float:
    """Return a timestamp strictly later than *previous*."""
    current = time()
    if current <= previous:
        current = math.nextafter(previous, math.inf)
    return current


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

def require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("must be a non-empty string", field=field)
    return value


def optional_text(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("must be a string or null", field=field)
    return value


def require_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("must be a number", field=field)
    if not math.isfinite(value):
        raise ValidationError("must be finite", field=field)
    return float(value)


def optional_number(value: Any, field: str) -> Optional[float]:
    return None if value is None else require_number(value, field)


def require_positive(value: Any, field: str) -> float:
    number = require_number(value, field)
    if number <= 0:
        raise ValidationError("must be greater than 0", field=field)
    return number


def coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"must be one of: {allowed}", field=field) from None


# ---------------------------------------------------------------------------
# Opaque JSON maps
# ---------------------------------------------------------------------------

def dump_map(value: Any, field: str) -> Optional[str]:
    """Serialise an optional key/value map for storage."""
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError("must be an object or null", field=field)
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("must be JSON-serialisable", field=field) from exc


def load_map(raw: Optional[str]) -> Optional[dict[str, Any]]:
    return None if raw is None else json.loads(raw)


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

def row_exists(conn: sqlite3.Connection, table: str, row_id: str) -> bool:
    row = conn.execute(
        f"SELECT 1 FROM {table} WHERE id = ?", (row_id,)  # noqa: S608
    ).fetchone()
    return row is not None


def require_reference(conn: sqlite3.Connection, entity: str, row_id: Optional[str]) -> str:
    """Raise :class:`InvalidReferenceError` unless *row_id* resolves."""
    if not isinstance(row_id, str) or not row_exists(conn, _REFERENCE_TABLES[entity], row_id):
        raise InvalidReferenceError(entity, row_id)
    return row_id


def require_node_in_project(conn: sqlite3.Connection, node_id: str, project_id: str) -> str:
    """Like :func:`require_reference`, but the node must also sit in *project_id*."""
    row = conn.execute(
        "SELECT project_id FROM canvas_nodes WHERE id = ?", (node_id,)
    ).fetchone()
    if row is None:
        raise InvalidReferenceError("node", node_id)
    if row["project_id"] != project_id:
        raise InvalidReferenceError(
            "node", node_id, detail=f"node belongs to a different project than {project_id!r}"
        )
    return node_id
