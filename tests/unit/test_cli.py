"""Tests for the semrel command line."""

from __future__ import annotations

import runpy
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from semrel import __version__
from semrel.cli.app import ci_env_set, main
from semrel.core.release import PipelineState, ReleaseResult


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _result(state: PipelineState) -> ReleaseResult:
    return ReleaseResult(state=state)


class TestOptions:
    """Tests for --version and --help."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert f"semrel 🚀 -- v{__version__}" in result.output

    def test_help(self, runner: CliRunner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "--path" in result.output
        assert "--write" in result.output

    def test_short_help(self, runner: CliRunner):
        assert runner.invoke(main, ["-h"]).exit_code == 0


class TestReleaseCommand:
    """Tests for how the CLI drives the pipeline."""

    @patch("semrel.cli.commands.release.run_release")
    def test_defaults_to_dry_run_in_current_directory(self, mock_run: MagicMock, runner: CliRunner):
        mock_run.return_value = _result(PipelineState.DONE)

        result = runner.invoke(main, [], env={"CI": None})

        assert result.exit_code == 0
        args, kwargs = mock_run.call_args
        assert args[0] == Path(".")
        assert kwargs["write"] is False
        assert kwargs["ci"] is False

    @patch("semrel.cli.commands.release.run_release")
    def test_write_and_path(self, mock_run: MagicMock, runner: CliRunner, tmp_path: Path):
        mock_run.return_value = _result(PipelineState.DONE)

        result = runner.invoke(main, ["--path", str(tmp_path), "--write"], env={"CI": None})

        assert result.exit_code == 0
        assert mock_run.call_args[0][0] == tmp_path
        assert mock_run.call_args.kwargs["write"] is True

    @pytest.mark.parametrize("value", ["true", "1", ""])
    @patch("semrel.cli.commands.release.run_release")
    def test_ci_variable_detected(self, mock_run: MagicMock, value: str, runner: CliRunner):
        mock_run.return_value = _result(PipelineState.DONE)

        runner.invoke(main, ["--write"], env={"CI": value})

        assert mock_run.call_args.kwargs["ci"] is True

    @patch("semrel.cli.commands.release.run_release")
    def test_failure_exits_with_one(self, mock_run: MagicMock, runner: CliRunner):
        mock_run.return_value = _result(PipelineState.FAILED)

        result = runner.invoke(main, [])

        assert result.exit_code == 1

    def test_missing_repository_exits_with_one(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(main, ["--path", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_file_path_exits_with_one(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text("[project]\n")

        result = runner.invoke(main, ["--path", str(path)])

        assert result.exit_code == 1


class TestModuleEntryPoint:
    """Tests for python -m semrel."""

    @patch("semrel.cli.main")
    def test_runs_main_as_script(self, mock_main: MagicMock):
        runpy.run_module("semrel", run_name="__main__")

        mock_main.assert_called_once_with()

    @patch("semrel.cli.main")
    def test_import_does_not_run_main(self, mock_main: MagicMock):
        runpy.run_module("semrel.__main__")

        mock_main.assert_not_called()


class TestCiEnvSet:
    """Tests for ci_env_set()."""

    def test_set(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CI", "")
        assert ci_env_set()

    def test_unset(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CI", raising=False)
        assert not ci_env_set()
