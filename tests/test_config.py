"""Tests for configuration loading."""

from pathlib import Path

import pytest

from requirement_analyzer.config import AnalyzerConfig, load_config
from requirement_analyzer.exceptions import InvalidConfigError, RequirementAnalyzerError


class TestAnalyzerConfig:
    def test_defaults(self):
        config = AnalyzerConfig()
        assert config.data_dir == "."
        assert config.default_name == "Untitled Analysis"
        assert config.default_language == "en"
        assert config.append_fields == []
        assert config.verbosity == "normal"
        assert config.log_file is None

    def test_database_path(self):
        config = AnalyzerConfig(data_dir="/tmp/specs")
        assert config.database_path == Path("/tmp/specs/.requirements/workspace.db")

    def test_blank_default_name(self):
        with pytest.raises(InvalidConfigError) as excinfo:
            AnalyzerConfig(default_name="  ")
        assert excinfo.value.key == "default_name"

    def test_unknown_language(self):
        with pytest.raises(InvalidConfigError):
            AnalyzerConfig(default_language="fr")

    def test_unknown_verbosity(self):
        with pytest.raises(InvalidConfigError):
            AnalyzerConfig(verbosity="loud")

    def test_append_fields_must_be_list(self):
        with pytest.raises(InvalidConfigError):
            AnalyzerConfig(append_fields="notes")


class TestLoadConfig:
    def test_no_sources(self):
        assert load_config() == AnalyzerConfig()

    def test_project_file_with_table(self, tmp_path):
        (tmp_path / "requirement-analyzer.toml").write_text(
            '[requirement-analyzer]\ndefault_name = "Draft"\nappend_fields = ["notes"]\n'
        )
        config = load_config()
        assert config.default_name == "Draft"
        assert config.append_fields == ["notes"]

    def test_explicit_file_overrides_project(self, tmp_path):
        (tmp_path / "requirement-analyzer.toml").write_text('default_name = "Project"\n')
        explicit = tmp_path / "explicit.toml"
        explicit.write_text('default_name = "Explicit"\ndefault_language = "de"\n')
        config = load_config(explicit)
        assert config.default_name == "Explicit"
        assert config.default_language == "de"

    def test_global_file(self, tmp_path):
        home = tmp_path / "home"
        home.mkdir(exist_ok=True)
        (home / ".requirement-analyzer.toml").write_text('verbosity = "quiet"\n')
        assert load_config().verbosity == "quiet"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(RequirementAnalyzerError):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        broken = tmp_path / "broken.toml"
        broken.write_text("default_name = \n")
        with pytest.raises(RequirementAnalyzerError):
            load_config(broken)

    def test_unknown_key(self, tmp_path):
        extra = tmp_path / "extra.toml"
        extra.write_text('colour = "blue"\n')
        with pytest.raises(RequirementAnalyzerError):
            load_config(extra)

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("REQAN_DEFAULT_NAME", "From env")
        monkeypatch.setenv("REQAN_APPEND_FIELDS", "notes, problem.problem ,")
        config = load_config()
        assert config.default_name == "From env"
        assert config.append_fields == ["notes", "problem.problem"]

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "requirement-analyzer.toml").write_text('data_dir = "from-file"\n')
        monkeypatch.setenv("REQAN_DATA_DIR", "from-env")
        assert load_config().data_dir == "from-env"

    def test_cli_overrides(self, monkeypatch):
        monkeypatch.setenv("REQAN_DATA_DIR", "from-env")
        config = load_config(data_dir="from-cli", verbose=True)
        assert config.data_dir == "from-cli"
        assert config.verbosity == "verbose"

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv("REQAN_DATA_DIR", "from-env")
        config = load_config(data_dir=None, verbose=False)
        assert config.data_dir == "from-env"
        assert config.verbosity == "normal"

    def test_log_file_from_env(self, monkeypatch):
        monkeypatch.setenv("REQAN_LOG_FILE", "logs/analyzer.log")
        assert load_config().log_file == "logs/analyzer.log"

    def test_empty_log_file_env_is_unset(self, monkeypatch):
        monkeypatch.setenv("REQAN_LOG_FILE", "")
        assert load_config().log_file is None

    def test_log_file_override(self):
        assert load_config(log_file="run.log").log_file == "run.log"
