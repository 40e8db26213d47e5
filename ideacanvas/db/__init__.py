"""Database layer package.

Public re-exports so callers can write::

    from ideacanvas.db import get_connection, init_db
    from ideacanvas.db import nodes, edges
"""

from ideacanvas.db.connection import get_connection, transaction
from ideacanvas.db.migrations import init_db
from ideacanvas.db import ai_documents, comments, edges, nodes, projects, shares, users

__all__ = [
    "get_connection",
    "transaction",
    "init_db",
    "ai_documents",
    "comments",
    "edges",
    "nodes",
    "projects",
    "shares",
    "users",
]
