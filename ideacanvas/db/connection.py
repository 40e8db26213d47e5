"""SQLite connections and write transactions.

The HTTP app keeps one connection for its lifetime and hands it to one
request at a time (see :func:`ideacanvas.api.deps.get_db`).  The CLI opens a
short-lived connection per command.  Either way every store write goes
through :func:`transaction`::

    conn = get_connection()
    with transaction(conn):
        require_reference(conn, "project", project_id)
        conn.execute("INSERT INTO canvas_nodes ...")
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from loguru import logger

from ideacanvas.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open a connection with foreign keys on, WAL journaling and named rows.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.
            Pass ``":memory:"`` for an isolated throwaway database.

    The connection may be used from worker threads, but never by two of them
    at once; callers serialise access themselves.
    """
    path = db_path or settings.db_path
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(
        str(path),
        timeout=settings.db_busy_timeout,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    logger.debug("Opened SQLite connection to {}", path)
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the block as one ``BEGIN IMMEDIATE`` transaction.

    The write lock is taken before the block runs, so reference and
    uniqueness checks made inside it still hold when the writes land, even
    with another process (the CLI next to the server) on the same file.
    Commits on success and rolls back on any exception.  A nested call joins
    the transaction already open.
    """
    if conn.in_transaction:
        yield conn
        return

    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()
