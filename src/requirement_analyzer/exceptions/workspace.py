"""Workspace and persistence exceptions: document lookups, stored payloads."""

from .base import RequirementAnalyzerError


class WorkspaceError(RequirementAnalyzerError):
    """Base class for errors raised while managing the document collection."""

    pass


class DocumentNotFoundError(WorkspaceError):
    """Raised when a document id is not part of the workspace."""

    def __init__(self, document_id: str):
        super().__init__(
            f"No analysis with id '{document_id}'", details={"document_id": document_id}
        )
        self.document_id = document_id


class StorageError(RequirementAnalyzerError):
    """Base class for persistence errors."""

    pass


class CorruptDocumentError(StorageError):
    """Raised when a stored document payload cannot be read back."""

    def __init__(self, document_id: str, reason: str):
        super().__init__(
            f"Stored analysis '{document_id}' is unreadable",
            details={"document_id": document_id, "reason": reason},
        )
        self.document_id = document_id
        self.reason = reason
