"""Exception hierarchy for Requirement Analyzer."""

from .base import RequirementAnalyzerError
from .config import ConfigurationError, InvalidConfigError
from .workspace import (
    CorruptDocumentError,
    DocumentNotFoundError,
    StorageError,
    WorkspaceError,
)

__all__ = [
    "RequirementAnalyzerError",
    "ConfigurationError",
    "InvalidConfigError",
    "WorkspaceError",
    "DocumentNotFoundError",
    "StorageError",
    "CorruptDocumentError",
]
