"""Database initialisation.

``init_db(conn)`` is idempotent and safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

from loguru import logger

from ideacanvas.config import settings


def _read_schema() -> str:
    return settings.schema_path.read_text(encoding="utf-8")


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes.

    Every DDL statement in ``schema.sql`` uses ``IF NOT EXISTS``, so calling
    this repeatedly on the same database is safe.

    Args:
        conn: An open, configured SQLite connection.
    """
    # executescript() issues an implicit COMMIT before running, which is fine
    # for a DDL-only script.
    conn.executescript(_read_schema())
    logger.debug("Schema ensured")
