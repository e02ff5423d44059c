"""Shared fixtures for semrel tests."""

from __future__ import annotations

import io
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

import pytest
from rich.console import Console

from semrel.vcs.git import Commit

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def make_commit(message: str, sha: str = "abc1234def") -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat: add user authentication", sha="feat1234567890")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix(core): handle empty config", sha="fix1234567890")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("feat(api)!: drop v1 endpoints", sha="break1234567890")


@pytest.fixture
def sample_commits() -> list[Commit]:
    return [
        make_commit("feat: add login", sha="a1"),
        make_commit("fix(core): handle empty config", sha="b2"),
        make_commit("docs: update readme", sha="c3"),
        make_commit("chore: tidy", sha="d4"),
        make_commit("feat(api)!: drop v1 endpoints", sha="e5"),
        make_commit("Merge branch 'main'", sha="f6"),
    ]


@pytest.fixture
def console() -> Console:
    """A console that records output instead of writing to the terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def err_console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


def git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_all(path: Path, message: str) -> None:
    git(path, "add", "-A")
    git(path, "commit", "--allow-empty", "-m", message)


PYPROJECT = """\
[project]
name = "test-project"
version = "1.0.0"
description = "A test project"

[project.urls]
Homepage = "https://example.com"
"""


@pytest.fixture
def temp_git_repo_with_pyproject(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A git repository with one commit containing a pyproject.toml."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    monkeypatch.delenv("GIT_COMMITTER_NAME", raising=False)
    monkeypatch.delenv("GIT_COMMITTER_EMAIL", raising=False)

    git(tmp_path, "init")
    git(tmp_path, "config", "user.name", "Release Bot")
    git(tmp_path, "config", "user.email", "release@example.com")
    git(tmp_path, "config", "commit.gpgsign", "false")
    git(tmp_path, "config", "tag.gpgsign", "false")

    (tmp_path / "pyproject.toml").write_text(PYPROJECT)
    commit_all(tmp_path, "chore: initial commit")
    return tmp_path
