"""CRUD operations for the ``users`` table.

Users belong to the identity context; this module only keeps the minimal
registry the rest of the canvas model references.  Users are never deleted
here.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from loguru import logger

from ideacanvas.db.connection import transaction
from ideacanvas.db.models import User
from ideacanvas.db.validation import new_id, now, optional_text, require_text, touched
from ideacanvas.errors import ConflictError, NotFoundError, ValidationError


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        avatar_url=row["avatar_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_user(
    conn: sqlite3.Connection,
    email: str,
    name: str,
    avatar_url: Optional[str] = None,
) -> User:
    """Register a user.

    Raises:
        ValidationError: Empty name or a malformed email address.
        ConflictError: The email is already registered (case-insensitive).
    """
    email = require_text(email, "email").strip()
    if "@" not in email:
        raise ValidationError("must be an email address", field="email")
    name = require_text(name, "name")
    avatar_url = optional_text(avatar_url, "avatar_url")

    uid = new_id()
    ts = now()
    try:
        with transaction(conn):
            conn.execute(
                """
                INSERT INTO users (id, email, name, avatar_url, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (uid, email, name, avatar_url, ts, ts),
            )
            user = get_user(conn, uid)
    except sqlite3.IntegrityError as exc:
        raise ConflictError(f"User already exists: {email!r}") from exc

    logger.info("Created user {} <{}>", uid, email)
    return user  # type: ignore[return-value]


def get_user(conn: sqlite3.Connection, user_id: str) -> Optional[User]:
    """Fetch a single user by id.  Returns ``None`` if not found."""
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _row_to_user(row) if row else None


def get_user_by_email(conn: sqlite3.Connection, email: str) -> Optional[User]:
    row = conn.execute(
        "SELECT * FROM users WHERE email = ? COLLATE NOCASE", (email.strip(),)
    ).fetchone()
    return _row_to_user(row) if row else None


def list_users(conn: sqlite3.Connection) -> list[User]:
    rows = conn.execute("SELECT * FROM users ORDER BY created_at, rowid").fetchall()
    return [_row_to_user(r) for r in rows]


def update_user(conn: sqlite3.Connection, user_id: str, **fields: Any) -> User:
    """Update ``name`` and/or ``avatar_url``; ``updated_at`` is always refreshed.

    Raises:
        NotFoundError: If ``user_id`` does not exist.
        ValidationError: For any other field or an empty name.
    """
    updates: dict[str, Any] = {}
    for key, value in fields.items():
        if key == "name":
            updates["name"] = require_text(value, "name")
        elif key == "avatar_url":
            updates["avatar_url"] = optional_text(value, "avatar_url")
        else:
            raise ValidationError(f"Cannot update field {key!r}", field=key)

    with transaction(conn):
        user = get_user(conn, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        updates["updated_at"] = touched(user.updated_at)
        set_clause = ", ".join(f"{col} = ?" for col in updates)
        conn.execute(
            f"UPDATE users SET {set_clause} WHERE id = ?",  # noqa: S608
            [*updates.values(), user_id],
        )
        return get_user(conn, user_id)  # type: ignore[return-value]
