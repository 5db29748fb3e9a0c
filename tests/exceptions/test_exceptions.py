"""Tests for the exception hierarchy."""

from requirement_analyzer.exceptions import (
    ConfigurationError,
    CorruptDocumentError,
    DocumentNotFoundError,
    InvalidConfigError,
    RequirementAnalyzerError,
    StorageError,
    WorkspaceError,
)


class TestBaseError:
    def test_message_only(self):
        error = RequirementAnalyzerError("boom")
        assert str(error) == "boom"
        assert error.details == {}

    def test_details_formatting(self):
        error = RequirementAnalyzerError("boom", details={"a": "1", "b": "2"})
        assert str(error) == "boom (a=1, b=2)"


class TestHierarchy:
    def test_config_errors(self):
        error = InvalidConfigError("verbosity", "loud", "expected quiet/normal/verbose")
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, RequirementAnalyzerError)
        assert error.details["reason"] == "expected quiet/normal/verbose"
        assert str(error).startswith("Invalid configuration for verbosity: loud")

    def test_workspace_errors(self):
        error = DocumentNotFoundError("abc")
        assert isinstance(error, WorkspaceError)
        assert "abc" in error.message

    def test_storage_errors(self):
        error = CorruptDocumentError("abc", "bad json")
        assert isinstance(error, StorageError)
        assert not isinstance(error, WorkspaceError)
        assert error.reason == "bad json"
