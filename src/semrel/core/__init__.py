"""Core business logic for semrel.

This module contains the fundamental building blocks:
- Semantic version parsing and bumping
- Conventional commit classification
- Reduction of commit severities to a release bump
- Changelog rendering

Release orchestration lives in :mod:`semrel.core.release`.
"""

from __future__ import annotations

from semrel.core.bump import apply_bump, decide
from semrel.core.changelog import render_changelog, write_changelog
from semrel.core.commits import (
    ParsedCommit,
    Severity,
    classify,
    filter_skip_release_commits,
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commits,
)
from semrel.core.version import Version, parse_version

__all__ = [
    # Version
    "Version",
    "parse_version",
    # Commits
    "ParsedCommit",
    "Severity",
    "classify",
    "filter_skip_release_commits",
    "format_commit_for_changelog",
    "get_breaking_changes",
    "group_commits_by_type",
    "parse_commits",
    # Bump
    "apply_bump",
    "decide",
    # Changelog
    "render_changelog",
    "write_changelog",
]
