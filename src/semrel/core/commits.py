"""Conventional commit classification.

Each commit message is reduced to a :class:`Severity`. The subject line is
checked against the header grammar::

    <type>[(<scope>)][!]: <description>

and the commit type is looked up in a type-to-severity table. A ``!``
before the colon, or a ``BREAKING CHANGE:`` footer anywhere in the
message, makes the commit a major change whatever its type.

Classification is total: anything that does not fit the grammar is
``Severity.UNKNOWN``.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from semrel.config.models import CommitsConfig
    from semrel.vcs.git import Commit


class Severity(IntEnum):
    """Change impact of a commit, ordered from least to most severe."""

    UNKNOWN = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


DEFAULT_TYPE_SEVERITY: Mapping[str, Severity] = {
    "fix": Severity.PATCH,
    "feat": Severity.MINOR,
}

DEFAULT_BREAKING_PATTERN = r"^BREAKING[ -]CHANGE:"


@dataclass(frozen=True)
class CommitHeader:
    """The parts of a well-formed conventional commit subject."""

    commit_type: str
    scope: str | None
    breaking: bool
    description: str


def parse_header(subject: str) -> CommitHeader | None:
    """Parse a commit subject, or return None if it is not conventional.

    The type must be lowercase ASCII letters, so prose such as
    ``Fix: typo`` or ``Feature: ...`` is not treated as a typed commit.
    """
    pos = 0
    end = len(subject)

    while pos < end and "a" <= subject[pos] <= "z":
        pos += 1
    if pos == 0:
        return None
    commit_type = subject[:pos]

    scope = None
    if pos < end and subject[pos] == "(":
        close = subject.find(")", pos + 1)
        if close == -1:
            return None
        scope = subject[pos + 1 : close]
        if not scope.strip() or "(" in scope:
            return None
        pos = close + 1

    breaking = pos < end and subject[pos] == "!"
    if breaking:
        pos += 1

    if not subject.startswith(": ", pos):
        return None
    description = subject[pos + 2 :].strip()
    if not description:
        return None

    return CommitHeader(commit_type, scope, breaking, description)


def has_breaking_footer(message: str, breaking_pattern: str = DEFAULT_BREAKING_PATTERN) -> bool:
    """True if any line of the message carries a breaking-change marker."""
    return re.search(breaking_pattern, message, re.MULTILINE) is not None


def type_severity_table(config: CommitsConfig) -> dict[str, Severity]:
    """Build the type-to-severity table from configuration.

    When a type is listed in more than one tier, the most severe wins.
    """
    table: dict[str, Severity] = {}
    for types, severity in (
        (config.types_patch, Severity.PATCH),
        (config.types_minor, Severity.MINOR),
        (config.types_major, Severity.MAJOR),
    ):
        for commit_type in types:
            table[commit_type] = severity
    return table


def classify(
    message: str,
    table: Mapping[str, Severity] = DEFAULT_TYPE_SEVERITY,
    breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
) -> Severity:
    """Classify a full commit message."""
    if has_breaking_footer(message, breaking_pattern):
        return Severity.MAJOR

    lines = message.strip().splitlines()
    header = parse_header(lines[0]) if lines else None
    if header is None:
        return Severity.UNKNOWN
    if header.breaking:
        return Severity.MAJOR
    return table.get(header.commit_type, Severity.UNKNOWN)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit together with its conventional-commit interpretation."""

    commit: Commit
    commit_type: str | None
    scope: str | None
    description: str
    is_breaking: bool
    severity: Severity

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @classmethod
    def from_commit(
        cls,
        commit: Commit,
        breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
        table: Mapping[str, Severity] = DEFAULT_TYPE_SEVERITY,
    ) -> ParsedCommit:
        header = parse_header(commit.subject)
        severity = classify(commit.message, table, breaking_pattern)

        if header is None:
            return cls(
                commit=commit,
                commit_type=None,
                scope=None,
                description=commit.subject.strip(),
                is_breaking=severity is Severity.MAJOR,
                severity=severity,
            )

        return cls(
            commit=commit,
            commit_type=header.commit_type,
            scope=header.scope,
            description=header.description,
            is_breaking=severity is Severity.MAJOR,
            severity=severity,
        )


def parse_commits(commits: Iterable[Commit], config: CommitsConfig) -> list[ParsedCommit]:
    """Classify every commit using the configured type table."""
    table = type_severity_table(config)
    return [ParsedCommit.from_commit(c, config.breaking_pattern, table) for c in commits]


def filter_skip_release_commits(commits: Iterable[Commit], patterns: list[str]) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers are plain substrings matched case-insensitively.
    """
    lowered = [p.lower() for p in patterns]
    return [c for c in commits if not any(p in c.message.lower() for p in lowered)]


def group_commits_by_type(parsed: Iterable[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    """Group parsed commits by type; non-conventional commits go under "other"."""
    grouped: dict[str, list[ParsedCommit]] = defaultdict(list)
    for pc in parsed:
        grouped[pc.commit_type or "other"].append(pc)
    return dict(grouped)


def get_breaking_changes(parsed: Iterable[ParsedCommit]) -> list[ParsedCommit]:
    return [pc for pc in parsed if pc.is_breaking]


def format_commit_for_changelog(
    pc: ParsedCommit,
    *,
    include_scope: bool = True,
    include_sha: bool = False,
) -> str:
    """Format a parsed commit as a Markdown list item."""
    parts = ["-"]
    if pc.is_breaking:
        parts.append("[BREAKING]")
    if include_scope and pc.scope:
        parts.append(f"**{pc.scope}:**")
    parts.append(pc.description)
    if include_sha:
        parts.append(f"({pc.commit.sha[:7]})")
    return " ".join(parts)
