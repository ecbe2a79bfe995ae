"""Tests for cli.py -- Click CLI interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from va_importer.cli import main


@pytest.fixture(autouse=True)
def _use_tmp_dirs(tmp_path, monkeypatch):
    """Keep logs out of the home directory."""
    monkeypatch.setenv("VA_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture(autouse=True)
def _no_env_file(monkeypatch):
    """Prevent CLI from loading a stray .env file."""
    monkeypatch.setattr("va_importer.cli._find_config_file", lambda project_dir: None)


@pytest.fixture
def tools():
    with (
        patch("va_importer.host.session.get_duration", return_value=2.0),
        patch("va_importer.host.session.normalization_gain", return_value=1.0),
        patch("va_importer.host.session.render_glue") as render,
    ):
        yield render


class TestHelpOutput:
    def test_help_flag(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Import VA recordings" in result.output
        assert "--no-import" in result.output
        assert "--dry-run" in result.output
        assert "--select-all" in result.output


class TestRun:
    def test_full_run_writes_session(self, project, tools, make_va_tree):
        make_va_tree({"Alice": ["line1.wav", "line2.WAV", "notes.txt"]})

        result = CliRunner().invoke(main, [str(project), "--yes"])

        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert "Done: 2 imported, 1 tracks sorted, 2 markers" in result.output
        data = json.loads((project / "session.json").read_text())
        assert [t["name"] for t in data["tracks"]] == ["Alice"]
        assert len(data["markers"]) == 2
        assert len(data["undo_history"]) == 3

    def test_confirmation_prompt(self, project, tools, make_va_tree):
        make_va_tree({"Alice": ["line1.wav"]})
        result = CliRunner().invoke(
            main, [str(project), "--no-sort", "--no-glue"], input="y\n"
        )
        assert result.exit_code == 0, result.output
        assert 'Import 1 audio files from folder "importva"?' in result.output

    def test_dry_run_writes_nothing(self, project, tools, make_va_tree):
        make_va_tree({"Alice": ["line1.wav", "line2.wav"]})
        result = CliRunner().invoke(main, [str(project), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Would import 2 audio files" in result.output
        assert not (project / "session.json").exists()

    def test_missing_folder_exits_nonzero(self, project, tools):
        result = CliRunner().invoke(main, [str(project)])
        assert result.exit_code == 1
        assert 'Could not find folder "importva"' in result.output
        assert not (project / "session.json").exists()

    def test_nested_va_dir_name_rejected(self, project, tools, monkeypatch):
        monkeypatch.setenv("VA_VA_DIR_NAME", "media/importva")
        result = CliRunner().invoke(main, [str(project)])
        assert result.exit_code == 1
        assert "single folder name" in result.output

    def test_host_failure_reported(self, project, tools, make_va_tree):
        make_va_tree({"Alice": ["line1.wav"]})
        with patch(
            "va_importer.host.session.get_duration", side_effect=ValueError("empty")
        ):
            result = CliRunner().invoke(main, [str(project), "--yes"])
        assert result.exit_code == 1
        assert "Cannot insert" in result.output
        # The partial session (empty track) is still saved
        data = json.loads((project / "session.json").read_text())
        assert [t["name"] for t in data["tracks"]] == ["Alice"]

    def test_corrupt_session_reported(self, project, tools):
        (project / "session.json").write_text("{oops")
        result = CliRunner().invoke(main, [str(project), "--no-import"])
        assert result.exit_code == 1
        assert "Failed to read session" in result.output

    def test_sort_only_on_saved_session(self, project, tools, make_va_tree):
        make_va_tree({"Alice": ["line1.wav", "line2.wav"]})
        CliRunner().invoke(main, [str(project), "--yes", "--no-sort", "--no-glue"])

        result = CliRunner().invoke(main, [str(project), "--no-import", "--no-glue"])

        assert result.exit_code == 0, result.output
        data = json.loads((project / "session.json").read_text())
        assert data["undo_history"] == ["SKYW: Import audio files", "SKYW: Sort items by RMS"]
