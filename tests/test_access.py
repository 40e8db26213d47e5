"""Tests for effective permissions and project visibility."""

from __future__ import annotations

import sqlite3
from typing import Generator

import pytest

from ideacanvas.access import (
    effective_permission,
    require_owner,
    require_permission,
)
from ideacanvas.db.connection import get_connection
from ideacanvas.db.migrations import init_db
from ideacanvas.db.models import Permission
from ideacanvas.db.projects import create_project, get_user_projects
from ideacanvas.db.shares import create_share, delete_share
from ideacanvas.db.users import create_user
from ideacanvas.errors import ForbiddenError


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture()
def people(conn):
    return {
        "owner": create_user(conn, "owner@example.com", "Owner"),
        "guest": create_user(conn, "guest@example.com", "Guest"),
        "stranger": create_user(conn, "stranger@example.com", "Stranger"),
    }


@pytest.fixture()
def project(conn, people):
    return create_project(conn, "Roadmap", owner_id=people["owner"].id)


class TestPermissionOrder:
    def test_ranks(self) -> None:
        assert Permission.VIEW.rank < Permission.COMMENT.rank < Permission.EDIT.rank

    @pytest.mark.parametrize(
        "granted,required,allowed",
        [
            (Permission.EDIT, Permission.VIEW, True),
            (Permission.COMMENT, Permission.COMMENT, True),
            (Permission.COMMENT, Permission.EDIT, False),
            (Permission.VIEW, Permission.COMMENT, False),
        ],
    )
    def test_allows(self, granted, required, allowed) -> None:
        assert granted.allows(required) is allowed


class TestEffectivePermission:
    def test_owner_has_edit(self, conn, people, project) -> None:
        assert effective_permission(conn, project.id, people["owner"].id) is Permission.EDIT

    def test_owner_ignores_share_rows(self, conn, people, project) -> None:
        create_share(conn, project.id, people["owner"].id, "view", people["owner"].id)
        assert effective_permission(conn, project.id, people["owner"].id) is Permission.EDIT

    def test_no_share_means_no_access(self, conn, people, project) -> None:
        assert effective_permission(conn, project.id, people["stranger"].id) is None

    def test_highest_share_wins(self, conn, people, project) -> None:
        owner, guest = people["owner"], people["guest"]
        create_share(conn, project.id, guest.id, "view", owner.id)
        create_share(conn, project.id, guest.id, "edit", owner.id)
        create_share(conn, project.id, guest.id, "comment", owner.id)
        assert effective_permission(conn, project.id, guest.id) is Permission.EDIT

    def test_revoked_share(self, conn, people, project) -> None:
        share = create_share(conn, project.id, people["guest"].id, "edit", people["owner"].id)
        delete_share(conn, share.id)
        assert effective_permission(conn, project.id, people["guest"].id) is None

    def test_missing_project(self, conn, people) -> None:
        assert effective_permission(conn, "ghost", people["owner"].id) is None


class TestRequirePermission:
    def test_sufficient_tier_returns_grant(self, conn, people, project) -> None:
        create_share(conn, project.id, people["guest"].id, "comment", people["owner"].id)
        granted = require_permission(conn, project.id, people["guest"].id, Permission.VIEW)
        assert granted is Permission.COMMENT

    def test_insufficient_tier(self, conn, people, project) -> None:
        create_share(conn, project.id, people["guest"].id, "view", people["owner"].id)
        with pytest.raises(ForbiddenError):
            require_permission(conn, project.id, people["guest"].id, Permission.COMMENT)

    def test_missing_project_is_forbidden(self, conn, people) -> None:
        with pytest.raises(ForbiddenError):
            require_permission(conn, "ghost", people["owner"].id, Permission.VIEW)

    def test_require_owner(self, conn, people, project) -> None:
        create_share(conn, project.id, people["guest"].id, "edit", people["owner"].id)
        assert require_owner(conn, project.id, people["owner"].id).id == project.id
        with pytest.raises(ForbiddenError):
            require_owner(conn, project.id, people["guest"].id)


class TestUserProjects:
    def test_union_without_duplicates(self, conn, people) -> None:
        owner, guest = people["owner"], people["guest"]
        p1 = create_project(conn, "P1", owner_id=owner.id)
        p2 = create_project(conn, "P2", owner_id=guest.id)
        create_project(conn, "P3", owner_id=guest.id)
        create_share(conn, p2.id, owner.id, "view", guest.id)
        create_share(conn, p2.id, owner.id, "edit", guest.id)

        projects = get_user_projects(conn, owner.id)

        assert [p.id for p in projects] == [p1.id, p2.id]

    def test_no_projects(self, conn, people) -> None:
        assert get_user_projects(conn, people["stranger"].id) == []
