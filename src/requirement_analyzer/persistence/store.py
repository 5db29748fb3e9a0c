"""Save and load a whole workspace through an open database connection."""

import json
import sqlite3
from typing import Optional

from ..exceptions import CorruptDocumentError
from ..logging_config import get_logger
from ..workspace import DEFAULT_NAME, SAMPLE_NAME, Workspace
from .serialization import document_from_dict, document_to_dict

logger = get_logger(__name__)


def save_workspace(conn: sqlite3.Connection, workspace: Workspace) -> int:
    """Replace the stored document list and active id with ``workspace``.

    Everything happens in one transaction; on failure the previous state
    is kept.

    Parameters
    ----------
    conn:
        An open ``sqlite3.Connection`` (from ``WorkspaceDB.connect()``).
    workspace:
        The ``Workspace`` to persist.

    Returns
    -------
    int
        Number of documents written.
    """
    rows = []
    for position, doc in enumerate(workspace):
        payload = document_to_dict(doc)
        rows.append(
            (
                doc.id,
                position,
                doc.name,
                doc.phase,
                payload["updated_at"],
                json.dumps(payload, ensure_ascii=False),
            )
        )

    cur = conn.cursor()
    try:
        cur.execute("BEGIN")
        cur.execute("DELETE FROM documents")
        if rows:
            cur.executemany(
                """
                INSERT INTO documents (id, position, name, phase, updated_at, payload)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        cur.execute(
            """
            INSERT INTO workspace_state (id, active_id) VALUES (1, ?)
            ON CONFLICT(id) DO UPDATE SET active_id = excluded.active_id
            """,
            (workspace.active_id,),
        )
        conn.commit()
    except Exception:
        conn.rollback()
        raise

    logger.debug("Saved %d analyses", len(rows))
    return len(rows)


def load_workspace(
    conn: sqlite3.Connection,
    default_name: str = DEFAULT_NAME,
    sample_name: Optional[str] = SAMPLE_NAME,
) -> Workspace:
    """Rebuild the stored workspace.

    An empty database yields ``Workspace.with_sample(sample_name)``, or an
    empty workspace when ``sample_name`` is None.

    Raises
    ------
    CorruptDocumentError
        If a stored payload is not valid JSON or not a document object.
    """
    rows = conn.execute("SELECT id, payload FROM documents ORDER BY position").fetchall()
    if not rows:
        if sample_name is None:
            return Workspace(default_name=default_name)
        return Workspace.with_sample(sample_name, default_name=default_name)

    documents = []
    for row in rows:
        try:
            payload = json.loads(row["payload"])
        except ValueError as e:
            raise CorruptDocumentError(row["id"], f"invalid JSON: {e}") from e
        try:
            doc = document_from_dict(payload)
        except CorruptDocumentError as e:
            raise CorruptDocumentError(row["id"], e.reason) from e
        documents.append(doc)

    state = conn.execute("SELECT active_id FROM workspace_state WHERE id = 1").fetchone()
    active_id = state["active_id"] if state is not None else None
    return Workspace(documents, active_id=active_id, default_name=default_name)
