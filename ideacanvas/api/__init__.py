"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from ideacanvas.api import app

    uvicorn ideacanvas.api:app --reload
"""

from ideacanvas.api.app import app, create_app

__all__ = ["app", "create_app"]
