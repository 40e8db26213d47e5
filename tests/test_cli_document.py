"""Tests for the 'document' CLI command group."""

import pytest
from typer.testing import CliRunner

from ideacanvas.db import get_connection, init_db
from ideacanvas.db.ai_documents import create_document, get_document
from ideacanvas.db.models import DocumentStatus
from ideacanvas.db.nodes import create_node
from ideacanvas.db.projects import create_project
from ideacanvas.db.shares import create_share
from ideacanvas.db.users import create_user
from cli.commands.document import document_app
from cli.commands.user import user_app

runner = CliRunner()


@pytest.fixture
def seeded(tmp_path, monkeypatch):
    """An owner, a view-only guest and a node with a generating document."""
    monkeypatch.setattr("ideacanvas.config.settings.workspace_dir", tmp_path)
    monkeypatch.setattr("cli.context.settings.cli_config_dir", tmp_path / ".ideacanvas_cli")

    conn = get_connection()
    init_db(conn)
    owner = create_user(conn, "owner@example.com", "Owner")
    guest = create_user(conn, "guest@example.com", "Guest")
    project = create_project(conn, "Launch", owner_id=owner.id)
    create_share(conn, project.id, guest.id, "view", owner.id)
    node = create_node(
        conn,
        project_id=project.id,
        node_type="ai_document",
        title="Brief",
        position_x=0,
        position_y=0,
        width=300,
        height=200,
        created_by=owner.id,
    )
    doc = create_document(conn, node.id, "project_brief", "Write the brief")
    conn.close()

    runner.invoke(user_app, ["switch", "owner@example.com"])
    return {"node": node, "doc": doc}


def _status(doc_id: str) -> DocumentStatus:
    conn = get_connection()
    try:
        return get_document(conn, doc_id).status
    finally:
        conn.close()


def test_complete_with_inline_content(seeded):
    result = runner.invoke(document_app, ["complete", seeded["doc"].id, "--content", "# Brief"])
    assert result.exit_code == 0
    assert "completed" in result.stdout
    assert _status(seeded["doc"].id) is DocumentStatus.COMPLETED


def test_complete_from_file(seeded, tmp_path):
    source = tmp_path / "brief.md"
    source.write_text("# Brief from file", encoding="utf-8")

    result = runner.invoke(document_app, ["complete", seeded["doc"].id, "--content-file", str(source)])

    assert result.exit_code == 0
    conn = get_connection()
    assert get_document(conn, seeded["doc"].id).generated_content == "# Brief from file"
    conn.close()


def test_complete_needs_exactly_one_source(seeded):
    result = runner.invoke(document_app, ["complete", seeded["doc"].id])
    assert result.exit_code == 1
    assert _status(seeded["doc"].id) is DocumentStatus.GENERATING


def test_fail_then_complete_is_rejected(seeded):
    result = runner.invoke(document_app, ["fail", seeded["doc"].id, "--reason", "timeout"])
    assert result.exit_code == 0
    assert _status(seeded["doc"].id) is DocumentStatus.FAILED

    result = runner.invoke(document_app, ["complete", seeded["doc"].id, "--content", "late"])
    assert result.exit_code == 1
    assert "cannot move" in result.stdout


def test_viewer_cannot_complete(seeded):
    runner.invoke(user_app, ["switch", "guest@example.com"])
    result = runner.invoke(document_app, ["complete", seeded["doc"].id, "--content", "x"])
    assert result.exit_code == 1
    assert _status(seeded["doc"].id) is DocumentStatus.GENERATING


def test_show(seeded):
    runner.invoke(user_app, ["switch", "guest@example.com"])
    result = runner.invoke(document_app, ["show", seeded["node"].id])
    assert result.exit_code == 0
    assert "status=generating" in result.stdout
    assert "Write the brief" in result.stdout


def test_show_unknown_node(seeded):
    result = runner.invoke(document_app, ["show", "ghost"])
    assert result.exit_code == 1
    assert "not found" in result.stdout
