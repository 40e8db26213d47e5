"""Identity collaborators.

Credential issuance lives outside this service.  Each request carries an
already-verified user id, and an :class:`IdentityProvider` turns the request
into a :class:`~ideacanvas.db.models.User`.  The provider is injected into the
app (``app.state.identity_provider``) rather than read from globals, so tests
and deployments can swap it.
"""

from __future__ import annotations

import sqlite3
from typing import Mapping, Optional, Protocol

from ideacanvas.db.models import User
from ideacanvas.db.users import get_user
from ideacanvas.errors import AuthenticationError


class IdentityProvider(Protocol):
    def resolve(self, conn: sqlite3.Connection, headers: Mapping[str, str]) -> User:
        """Return the authenticated user or raise :class:`AuthenticationError`."""
        ...


class HeaderIdentityProvider:
    """Trusts a user id forwarded by an upstream gateway in a request header.

    The id must belong to a registered user.
    """

    def __init__(self, header: str = "X-User-Id"):
        self.header = header

    def resolve(self, conn: sqlite3.Connection, headers: Mapping[str, str]) -> User:
        user_id: Optional[str] = headers.get(self.header)
        if not user_id:
            raise AuthenticationError(f"Missing {self.header} header")
        user = get_user(conn, user_id)
        if user is None:
            raise AuthenticationError(f"Unknown user: {user_id!r}")
        return user
