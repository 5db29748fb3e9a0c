"""Workspace persistence: JSON document payloads in a local SQLite database."""

from .database import WorkspaceDB
from .serialization import document_from_dict, document_to_dict, parse_timestamp
from .store import load_workspace, save_workspace

__all__ = [
    "WorkspaceDB",
    "document_from_dict",
    "document_to_dict",
    "load_workspace",
    "parse_timestamp",
    "save_workspace",
]
