"""End-to-end tests for the requirement-analyzer CLI."""

import json

import pytest
from typer.testing import CliRunner

from requirement_analyzer import __version__
from requirement_analyzer.cli import app
from requirement_analyzer.scoring import SECTIONS


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path):
    def _invoke(*args):
        return runner.invoke(app, ["--data-dir", str(tmp_path), *args])

    return _invoke


def _analyses(invoke, *args):
    result = invoke("list", "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestGlobalOptions:
    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "import" in result.output

    def test_invalid_config_file(self, runner, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text('default_language = "fr"\n')
        result = runner.invoke(app, ["--config", str(config), "list"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_log_file(self, invoke, tmp_path):
        log_path = tmp_path / "logs" / "cli.log"
        result = invoke("--verbose", "--log-file", str(log_path), "new", "Logged")
        assert result.exit_code == 0, result.output
        assert "requirement_analyzer.persistence.database - DEBUG" in log_path.read_text(
            encoding="utf-8"
        )


class TestDocumentCommands:
    def test_first_list_contains_sample(self, invoke, tmp_path):
        data = _analyses(invoke)
        assert [row["name"] for row in data["analyses"]] == ["Sample: Dark Mode Toggle"]
        assert data["analyses"][0]["active"]
        assert data["counts"]["All"] == 1
        assert (tmp_path / ".requirements" / "workspace.db").exists()

    def test_new_prepends_and_activates(self, invoke):
        result = invoke("new", "Checkout", "--phase", "MVP")
        assert result.exit_code == 0, result.output
        assert "Created" in result.output

        rows = _analyses(invoke)["analyses"]
        assert [row["name"] for row in rows] == ["Checkout", "Sample: Dark Mode Toggle"]
        assert rows[0]["active"]
        assert rows[0]["phase"] == "MVP"
        assert rows[0]["score"] == 4

    def test_new_rejects_unknown_phase(self, invoke):
        result = invoke("new", "Checkout", "--phase", "Someday")
        assert result.exit_code == 2

    def test_list_rejects_unknown_filter(self, invoke):
        result = invoke("list", "--phase", "Bogus")
        assert result.exit_code == 2

    def test_list_phase_filter(self, invoke):
        invoke("new", "Tagged", "--phase", "V2")
        invoke("new", "Loose")
        data = _analyses(invoke, "--phase", "V2")
        assert [row["name"] for row in data["analyses"]] == ["Tagged"]
        assert data["counts"]["V2"] == 1
        assert data["counts"]["Untagged"] == 2

    def test_list_table(self, invoke):
        invoke("new", "Table row")
        result = invoke("list")
        assert result.exit_code == 0
        assert "Table row" in result.output

    def test_use(self, invoke):
        sample_id = _analyses(invoke)["analyses"][0]["id"]
        invoke("new", "Other")
        result = invoke("use", sample_id)
        assert result.exit_code == 0, result.output
        rows = _analyses(invoke)["analyses"]
        assert [row["active"] for row in rows] == [False, True]

    def test_use_unknown_id(self, invoke):
        result = invoke("use", "nope")
        assert result.exit_code == 1
        assert "nope" in result.output

    def test_rename(self, invoke):
        invoke("new", "Before")
        result = invoke("rename", "After")
        assert result.exit_code == 0, result.output
        assert _analyses(invoke)["analyses"][0]["name"] == "After"

    def test_delete_last_leaves_blank(self, invoke):
        sample_id = _analyses(invoke)["analyses"][0]["id"]
        result = invoke("delete", sample_id)
        assert result.exit_code == 0, result.output
        rows = _analyses(invoke)["analyses"]
        assert [row["name"] for row in rows] == ["Untitled Analysis"]
        assert rows[0]["active"]


class TestTransferCommands:
    def test_export_to_stdout(self, invoke):
        invoke("new", "Exported", "--phase", "V1")
        result = invoke("export")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "# Exported"
        assert "*Target Phase: V1*" in lines

    def test_export_to_file(self, invoke, tmp_path):
        invoke("new", "To file")
        target = tmp_path / "out.md"
        result = invoke("export", "--output", str(target))
        assert result.exit_code == 0, result.output
        text = target.read_text(encoding="utf-8")
        assert text.startswith("# To file\n")
        assert text.endswith("\n")

    def test_export_unknown_id(self, invoke):
        result = invoke("export", "nope")
        assert result.exit_code == 1

    def test_import_as_new(self, invoke, tmp_path):
        source = tmp_path / "incoming.md"
        source.write_text("# Incoming\n## Notes\nFrom a file\n", encoding="utf-8")
        result = invoke("import", str(source))
        assert result.exit_code == 0, result.output
        rows = _analyses(invoke)["analyses"]
        assert rows[-1]["name"] == "Incoming"
        assert rows[-1]["active"]

    def test_import_round_trip(self, invoke, tmp_path):
        invoke("new", "Round trip", "--phase", "V3")
        target = tmp_path / "round.md"
        invoke("export", "--output", str(target))
        invoke("import", str(target))
        exported = invoke("export").output
        assert exported.splitlines()[0] == "# Round trip"
        assert "*Target Phase: V3*" in exported

    def test_import_merge_with_append(self, invoke, tmp_path):
        invoke("new", "Target")
        first = tmp_path / "first.md"
        first.write_text("# Ignored\n## Notes\nfirst\n", encoding="utf-8")
        second = tmp_path / "second.md"
        second.write_text("# Ignored\n## Notes\nsecond\n", encoding="utf-8")

        assert invoke("import", str(first), "--merge").exit_code == 0
        result = invoke("import", str(second), "--merge", "--append", "notes")
        assert result.exit_code == 0, result.output
        assert "Merged into" in result.output

        rows = _analyses(invoke)["analyses"]
        assert len(rows) == 2
        assert rows[0]["name"] == "Target"
        assert "first\n\nsecond" in invoke("export").output

    def test_import_unknown_append_key(self, invoke, tmp_path):
        source = tmp_path / "incoming.md"
        source.write_text("# Incoming\n", encoding="utf-8")
        result = invoke("import", str(source), "--merge", "--append", "problem.why")
        assert result.exit_code == 2

    def test_import_missing_file(self, invoke, tmp_path):
        result = invoke("import", str(tmp_path / "missing.md"))
        assert result.exit_code == 2


class TestScoreCommand:
    def test_score_json(self, invoke):
        invoke("new", "Scored")
        result = invoke("score", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["name"] == "Scored"
        assert data["score"] == 0
        assert list(data["sections"]) == list(SECTIONS)

    def test_score_text_with_sections(self, invoke):
        result = invoke("score", "--sections")
        assert result.exit_code == 0, result.output
        assert "% complete" in result.output
        assert "overview" in result.output

    def test_score_unknown_id(self, invoke):
        result = invoke("score", "nope")
        assert result.exit_code == 1
