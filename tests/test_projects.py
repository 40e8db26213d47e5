"""Tests for the project, AI document, share and comment stores.

Each test gets a fresh in-memory database.
"""

from __future__ import annotations

import sqlite3
from typing import Generator

import pytest

from ideacanvas.db.ai_documents import (
    complete_document,
    create_document,
    fail_document,
    find_document,
    get_document,
    get_document_by_node,
)
from ideacanvas.db.comments import create_comment, delete_comment, get_comment, list_comments
from ideacanvas.db.connection import get_connection
from ideacanvas.db.edges import create_edge, get_canvas
from ideacanvas.db.migrations import init_db
from ideacanvas.db.models import DocumentStatus, DocumentType, Permission
from ideacanvas.db.nodes import create_node, delete_node
from ideacanvas.db.projects import (
    create_project,
    delete_project,
    export_project,
    find_project,
    get_project,
    list_owned_projects,
    update_project,
)
from ideacanvas.db.shares import create_share, delete_share, list_shares
from ideacanvas.db.users import create_user
from ideacanvas.errors import (
    ConflictError,
    InvalidReferenceError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture()
def owner(conn):
    return create_user(conn, "owner@example.com", "Owner")


@pytest.fixture()
def guest(conn):
    return create_user(conn, "guest@example.com", "Guest")


@pytest.fixture()
def project(conn, owner):
    return create_project(conn, "Launch plan", owner_id=owner.id, description="Q3")


def _node(conn, project, user, title="Idea", node_type="ai_document"):
    return create_node(
        conn,
        project_id=project.id,
        node_type=node_type,
        title=title,
        position_x=0,
        position_y=0,
        width=240,
        height=160,
        created_by=user.id,
    )


# ---------------------------------------------------------------------------
# projects
# ---------------------------------------------------------------------------

class TestProjects:
    def test_create_and_get(self, conn, project, owner) -> None:
        assert project.owner_id == owner.id
        assert project.description == "Q3"
        assert get_project(conn, project.id) == project

    def test_unknown_owner(self, conn) -> None:
        with pytest.raises(InvalidReferenceError):
            create_project(conn, "Orphan", owner_id="ghost")

    def test_empty_name(self, conn, owner) -> None:
        with pytest.raises(ValidationError):
            create_project(conn, "", owner_id=owner.id)

    def test_get_missing(self, conn) -> None:
        assert find_project(conn, "nope") is None
        with pytest.raises(NotFoundError):
            get_project(conn, "nope")

    def test_update_clears_description(self, conn, project) -> None:
        updated = update_project(conn, project.id, description=None)
        assert updated.description is None
        assert updated.name == project.name
        assert updated.updated_at > project.updated_at

    def test_list_owned(self, conn, project, owner, guest) -> None:
        create_project(conn, "Guest's own", owner_id=guest.id)
        assert [p.id for p in list_owned_projects(conn, owner.id)] == [project.id]


class TestProjectDeleteCascade:
    def test_removes_everything(self, conn, project, owner, guest) -> None:
        a = _node(conn, project, owner, title="A")
        b = _node(conn, project, owner, title="B")
        create_edge(conn, project.id, a.id, b.id)
        doc = create_document(conn, a.id, DocumentType.PRD, "Write a PRD")
        create_share(conn, project.id, guest.id, Permission.VIEW, owner.id)
        create_comment(conn, project.id, "Nice", guest.id, node_id=a.id)
        create_comment(conn, project.id, "Overall nice", guest.id)

        assert delete_project(conn, project.id) is True

        canvas = get_canvas(conn, project.id)
        assert canvas.nodes == []
        assert canvas.edges == []
        assert find_document(conn, doc.id) is None
        assert list_shares(conn, project.id) == []
        assert list_comments(conn, project.id) == []
        assert find_project(conn, project.id) is None

    def test_missing_project(self, conn) -> None:
        assert delete_project(conn, "never-created") is False


class TestExport:
    def test_export_contains_canvas(self, conn, project, owner, guest) -> None:
        a = _node(conn, project, owner)
        create_document(conn, a.id, "lean_canvas", "Lean canvas please")
        create_share(conn, project.id, guest.id, "comment", owner.id)
        create_comment(conn, project.id, "Hi", guest.id)

        data = export_project(conn, project.id)

        assert data["project"]["id"] == project.id
        assert [n["id"] for n in data["nodes"]] == [a.id]
        assert data["nodes"][0]["type"] == "ai_document"
        assert data["ai_documents"][0]["status"] == "generating"
        assert data["shares"][0]["permission"] == "comment"
        assert len(data["comments"]) == 1
        assert data["edges"] == []


# ---------------------------------------------------------------------------
# AI documents
# ---------------------------------------------------------------------------

class TestAiDocuments:
    def test_starts_generating(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        doc = create_document(conn, node.id, DocumentType.PROJECT_BRIEF, "  Brief me  ")
        assert doc.status is DocumentStatus.GENERATING
        assert doc.generated_content == ""
        assert doc.prompt == "  Brief me  "
        assert get_document_by_node(conn, node.id) == doc

    def test_second_document_conflicts(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        first = create_document(conn, node.id, "prd", "One")
        with pytest.raises(ConflictError):
            create_document(conn, node.id, "prd", "Two")
        assert get_document_by_node(conn, node.id).id == first.id

    def test_unknown_node(self, conn) -> None:
        with pytest.raises(InvalidReferenceError):
            create_document(conn, "ghost", "prd", "Prompt")

    def test_bad_type_and_prompt(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        with pytest.raises(ValidationError):
            create_document(conn, node.id, "memo", "Prompt")
        with pytest.raises(ValidationError):
            create_document(conn, node.id, "prd", "")

    def test_node_without_document(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        with pytest.raises(NotFoundError):
            get_document_by_node(conn, node.id)

    def test_complete(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        doc = create_document(conn, node.id, "prd", "Prompt")
        done = complete_document(conn, doc.id, "# PRD\n...")
        assert done.status is DocumentStatus.COMPLETED
        assert done.generated_content == "# PRD\n..."
        assert done.updated_at > doc.updated_at

    def test_fail_keeps_reason(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        doc = create_document(conn, node.id, "prd", "Prompt")
        failed = fail_document(conn, doc.id, "model timeout")
        assert failed.status is DocumentStatus.FAILED
        assert failed.failure_reason == "model timeout"
        assert failed.generated_content == ""

    @pytest.mark.parametrize("finish", ["complete", "fail"])
    def test_terminal_states_are_final(self, conn, project, owner, finish) -> None:
        node = _node(conn, project, owner)
        doc = create_document(conn, node.id, "prd", "Prompt")
        if finish == "complete":
            complete_document(conn, doc.id, "done")
        else:
            fail_document(conn, doc.id)

        with pytest.raises(InvalidTransitionError):
            complete_document(conn, doc.id, "again")
        with pytest.raises(ConflictError):
            fail_document(conn, doc.id)

    def test_transition_missing_document(self, conn) -> None:
        with pytest.raises(NotFoundError):
            complete_document(conn, "ghost", "x")

    def test_node_delete_removes_document(self, conn, project, owner) -> None:
        node = _node(conn, project, owner)
        doc = create_document(conn, node.id, "prd", "Prompt")
        delete_node(conn, node.id)
        assert find_document(conn, doc.id) is None
        with pytest.raises(NotFoundError):
            get_document(conn, doc.id)


# ---------------------------------------------------------------------------
# shares
# ---------------------------------------------------------------------------

class TestShares:
    def test_create_and_list(self, conn, project, owner, guest) -> None:
        share = create_share(conn, project.id, guest.id, "edit", owner.id)
        assert share.permission is Permission.EDIT
        assert list_shares(conn, project.id) == [share]

    def test_unknown_tier(self, conn, project, owner, guest) -> None:
        with pytest.raises(ValidationError):
            create_share(conn, project.id, guest.id, "admin", owner.id)

    def test_unknown_grantee(self, conn, project, owner) -> None:
        with pytest.raises(InvalidReferenceError):
            create_share(conn, project.id, "ghost", "view", owner.id)

    def test_delete_always_succeeds(self, conn, project, owner, guest) -> None:
        share = create_share(conn, project.id, guest.id, "view", owner.id)
        assert delete_share(conn, share.id) is True
        assert delete_share(conn, share.id) is True
        assert list_shares(conn, project.id) == []


# ---------------------------------------------------------------------------
# comments
# ---------------------------------------------------------------------------

class TestComments:
    def test_project_and_node_comments_listed(self, conn, project, owner, guest) -> None:
        node = _node(conn, project, owner)
        general = create_comment(conn, project.id, "General", guest.id, position_x=5, position_y=6)
        anchored = create_comment(conn, project.id, "On node", guest.id, node_id=node.id)
        assert list_comments(conn, project.id) == [general, anchored]
        assert general.node_id is None
        assert general.position_x == 5

    def test_empty_content(self, conn, project, guest) -> None:
        with pytest.raises(ValidationError):
            create_comment(conn, project.id, " ", guest.id)

    def test_node_from_other_project(self, conn, project, owner, guest) -> None:
        other = create_project(conn, "Other", owner_id=owner.id)
        foreign = _node(conn, other, owner)
        with pytest.raises(InvalidReferenceError):
            create_comment(conn, project.id, "Hi", guest.id, node_id=foreign.id)

    def test_node_delete_removes_anchored_comments(self, conn, project, owner, guest) -> None:
        node = _node(conn, project, owner)
        general = create_comment(conn, project.id, "General", guest.id)
        create_comment(conn, project.id, "On node", guest.id, node_id=node.id)
        delete_node(conn, node.id)
        assert list_comments(conn, project.id) == [general]

    def test_delete_always_succeeds(self, conn, project, guest) -> None:
        comment = create_comment(conn, project.id, "Bye", guest.id)
        assert delete_comment(conn, comment.id) is True
        assert get_comment(conn, comment.id) is None
        assert delete_comment(conn, "never-created") is True
