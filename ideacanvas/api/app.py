"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (``app.state.db``) and
initialises the schema.  Requests take turns on it through
``app.state.db_lock``; see :func:`ideacanvas.api.deps.get_db`.  On shutdown
it closes the connection cleanly.

Identity
--------
Every route except ``/health`` and ``POST /users`` resolves the caller through
``app.state.identity_provider`` (a :class:`~ideacanvas.identity.HeaderIdentityProvider`
unless another one is passed to :func:`create_app`).

Routers
-------
    /users                          user registry
    /projects                       projects, canvas, shares and comments per project
    /nodes, /edges                  node and edge mutations
    /nodes/{id}/ai-document         AI documents
    /ai-documents                   worker transitions
    /shares, /comments              revocation and deletion by id
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ideacanvas import __version__
from ideacanvas.api.errors import register_exception_handlers
from ideacanvas.api.middleware import LoggingMiddleware
from ideacanvas.api.routers import comments as comments_router
from ideacanvas.api.routers import documents as documents_router
from ideacanvas.api.routers import edges as edges_router
from ideacanvas.api.routers import nodes as nodes_router
from ideacanvas.api.routers import projects as projects_router
from ideacanvas.api.routers import shares as shares_router
from ideacanvas.api.routers import users as users_router
from ideacanvas.config import settings
from ideacanvas.db import get_connection, init_db
from ideacanvas.identity import HeaderIdentityProvider, IdentityProvider
from ideacanvas.logging import configure_logging


def create_app(
    db_path: Optional[Union[Path, str]] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        db_path: Database to open at startup; defaults to ``settings.db_path``.
        identity_provider: Collaborator resolving the caller of each request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the DB on startup and close it on shutdown."""
        conn = get_connection(db_path)
        init_db(conn)
        app.state.db = conn
        app.state.db_lock = asyncio.Lock()
        logger.info("Idea Canvas API ready (db={})", db_path or settings.db_path)
        try:
            yield
        finally:
            conn.close()
            logger.info("Idea Canvas API shut down")

    configure_logging()
    app = FastAPI(
        title="Idea Canvas API",
        description=(
            "Project canvases of typed nodes and edges, AI documents with a "
            "generation state machine, comments and permission-tiered sharing."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.identity_provider = identity_provider or HeaderIdentityProvider(settings.identity_header)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    app.include_router(users_router.router, prefix="/users", tags=["users"])
    app.include_router(projects_router.router, prefix="/projects", tags=["projects"])
    app.include_router(nodes_router.router, tags=["nodes"])
    app.include_router(edges_router.router, tags=["edges"])
    app.include_router(documents_router.router, tags=["ai-documents"])
    app.include_router(shares_router.router, tags=["shares"])
    app.include_router(comments_router.router, tags=["comments"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn ideacanvas.api.app:app --reload
app = create_app()
