"""FastAPI dependencies shared by every router."""

from __future__ import annotations

import sqlite3
from typing import AsyncIterator

from fastapi import Depends, Request

from ideacanvas.db.models import User


async def get_db(request: Request) -> AsyncIterator[sqlite3.Connection]:
    """The connection opened by the app lifespan, held for the whole request.

    Sync routes run on the threadpool; ``app.state.db_lock`` keeps two of them
    from interleaving statements (or a rollback) on the shared connection.
    """
    async with request.app.state.db_lock:
        yield request.app.state.db


def current_user(request: Request, conn: sqlite3.Connection = Depends(get_db)) -> User:
    """Resolve the caller through the injected identity provider."""
    return request.app.state.identity_provider.resolve(conn, request.headers)
