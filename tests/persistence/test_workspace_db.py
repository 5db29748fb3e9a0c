"""Tests for the sqlite workspace database."""

import tempfile
from pathlib import Path

import pytest

from requirement_analyzer.document import create_blank_document
from requirement_analyzer.exceptions import CorruptDocumentError, StorageError
from requirement_analyzer.persistence import WorkspaceDB, load_workspace, save_workspace
from requirement_analyzer.workspace import Workspace


class TestDatabaseSchema:
    def test_creates_tables(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                tables = db.conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
                ).fetchall()
                table_names = {r["name"] for r in tables}
                assert {"schema_version", "documents", "workspace_state"} <= table_names
                assert db.schema_version == 1

    def test_location_and_gitignore(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                assert db.db_path == Path(tmpdir) / ".requirements" / "workspace.db"
            assert (Path(tmpdir) / ".requirements" / ".gitignore").read_text() == "*\n"

    def test_migration_is_idempotent(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir):
                pass
            with WorkspaceDB(tmpdir) as db:
                rows = db.conn.execute("SELECT version FROM schema_version").fetchall()
                assert len(rows) == 1

    def test_conn_requires_connect(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(StorageError):
                WorkspaceDB(tmpdir).conn


class TestSaveLoad:
    def test_empty_database_yields_sample(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                ws = load_workspace(db.conn)
                assert [doc.name for doc in ws] == ["Sample: Dark Mode Toggle"]

    def test_empty_database_without_sample(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                assert len(load_workspace(db.conn, sample_name=None)) == 0

    def test_round_trip(self, full_document):
        ws = Workspace([create_blank_document("Other")])
        ws.add(full_document, activate=False)
        ws.create("Newest")
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                assert save_workspace(db.conn, ws) == 3
            with WorkspaceDB(tmpdir) as db:
                loaded = load_workspace(db.conn)
        assert [doc.name for doc in loaded] == ["Newest", "Other", "Checkout Redesign"]
        assert loaded.active_id == ws.active_id
        assert loaded.get(full_document.id) == full_document

    def test_save_replaces_previous_state(self):
        ws = Workspace.with_sample()
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                save_workspace(db.conn, ws)
                ws.remove(ws.active_id)
                save_workspace(db.conn, ws)
                loaded = load_workspace(db.conn)
        assert len(loaded) == 1
        assert loaded.active.name == "Untitled Analysis"

    def test_corrupt_payload(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with WorkspaceDB(tmpdir) as db:
                db.conn.execute(
                    "INSERT INTO documents (id, position, updated_at, payload) VALUES (?, ?, ?, ?)",
                    ("bad1", 0, "2024-01-01", "{not json"),
                )
                db.conn.commit()
                with pytest.raises(CorruptDocumentError) as excinfo:
                    load_workspace(db.conn)
        assert excinfo.value.document_id == "bad1"
