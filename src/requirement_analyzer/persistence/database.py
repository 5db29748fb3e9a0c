"""SQLite-backed workspace database stored in .requirements/ under the data directory."""

import sqlite3
from pathlib import Path
from typing import Optional, Union

from ..exceptions import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1

DB_DIRNAME = ".requirements"
DB_FILENAME = "workspace.db"


class WorkspaceDB:
    """Manages the ``.requirements/workspace.db`` SQLite database.

    Usage::

        with WorkspaceDB("/path/to/data") as db:
            workspace = load_workspace(db.conn)
            workspace.create("Checkout redesign")
            save_workspace(db.conn, workspace)
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.db_dir: Path = Path(root) / DB_DIRNAME
        self.db_path: Path = self.db_dir / DB_FILENAME
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise StorageError(
                "WorkspaceDB is not connected. Use as context manager or call connect()."
            )
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create .requirements/ and write a .gitignore so it stays untracked."""
        self.db_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.db_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text("*\n")

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        try:
            self._ensure_dir()
            conn = sqlite3.connect(str(self.db_path))
            conn.execute("PRAGMA journal_mode=WAL")
        except (OSError, sqlite3.Error) as e:
            raise StorageError(
                f"Cannot open workspace database: {e}", details={"path": str(self.db_path)}
            ) from e
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Workspace DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "WorkspaceDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create / upgrade all tables."""
        c = self.conn

        c.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER NOT NULL
            )
            """
        )
        row = c.execute("SELECT version FROM schema_version").fetchone()
        if row is None:
            c.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )

        # ── documents ────────────────────────────────────────────
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                id          TEXT    PRIMARY KEY,
                position    INTEGER NOT NULL,
                name        TEXT    NOT NULL DEFAULT '',
                phase       TEXT    NOT NULL DEFAULT '',
                updated_at  TEXT    NOT NULL,
                payload     TEXT    NOT NULL
            )
            """
        )

        # ── workspace_state (single row) ─────────────────────────
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS workspace_state (
                id          INTEGER PRIMARY KEY CHECK (id = 1),
                active_id   TEXT
            )
            """
        )

        c.execute("CREATE INDEX IF NOT EXISTS idx_documents_position ON documents(position)")

        c.commit()

    @property
    def schema_version(self) -> int:
        row = self.conn.execute("SELECT version FROM schema_version").fetchone()
        return int(row["version"]) if row is not None else 0
