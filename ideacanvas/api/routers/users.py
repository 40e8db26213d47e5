"""User registry endpoints.

Routes
------
POST  /users       Register a user (no credentials; identity is issued elsewhere)
GET   /users/me    The user resolved for this request
PATCH /users/me    Change the caller's name or avatar
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ideacanvas.api.deps import current_user, get_db
from ideacanvas.api.schemas import UserResponse
from ideacanvas.db.models import User, to_dict
from ideacanvas.db.users import create_user, update_user

router = APIRouter()


class UserCreate(BaseModel):
    email: str
    name: str
    avatar_url: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    avatar_url: Optional[str] = None


@router.post("", response_model=UserResponse, status_code=201)
def register(body: UserCreate, conn: sqlite3.Connection = Depends(get_db)) -> dict[str, Any]:
    """Register a new user."""
    user = create_user(conn, email=body.email, name=body.name, avatar_url=body.avatar_url)
    return to_dict(user)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(current_user)) -> dict[str, Any]:
    """Return the caller's own user record."""
    return to_dict(user)


@router.patch("/me", response_model=UserResponse)
def update_me(
    body: UserUpdate,
    user: User = Depends(current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Update the caller's profile; omitted fields are left unchanged."""
    updated = update_user(conn, user.id, **body.model_dump(exclude_unset=True))
    return to_dict(updated)
