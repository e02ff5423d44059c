"""Changelog rendering and writing.

A release section is rendered from the parsed commits of the release
range: breaking changes first, then one group per commit type. The same
text is written to the changelog file and used as the tag message.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from semrel.core.commits import format_commit_for_changelog, get_breaking_changes, group_commits_by_type
from semrel.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from semrel.core.commits import ParsedCommit
    from semrel.core.version import Version

CHANGELOG_HEADER = "# Changelog"

TYPE_LABELS = {
    "feat": "### ✨ Features",
    "fix": "### 🐛 Bug Fixes",
    "perf": "### ⚡ Performance",
    "docs": "### 📚 Documentation",
    "refactor": "### ♻️ Refactoring",
    "test": "### 🧪 Tests",
    "build": "### 📦 Build",
    "ci": "### 🔧 CI",
    "style": "### 💄 Style",
    "chore": "### 🔨 Chores",
    "other": "### 📝 Other",
}


def render_changelog(
    version: Version,
    parsed: Sequence[ParsedCommit],
    *,
    release_date: date | None = None,
    include_scope: bool = True,
    include_sha: bool = False,
) -> str:
    """Render the Markdown section for one release.

    Args:
        version: Version being released
        parsed: Classified commits in the release range
        release_date: Date shown in the heading (today, UTC, by default)
        include_scope: Prefix entries with their scope
        include_sha: Append the short commit sha to entries

    Returns:
        Changelog section, without a trailing newline
    """
    release_date = release_date or datetime.now(UTC).date()
    lines = [f"## [{version}] - {release_date.isoformat()}", ""]

    def add_group(label: str, entries: list[ParsedCommit]) -> None:
        lines.append(label)
        lines.append("")
        for pc in entries:
            lines.append(
                format_commit_for_changelog(pc, include_scope=include_scope, include_sha=include_sha)
            )
        lines.append("")

    breaking = get_breaking_changes(parsed)
    if breaking:
        add_group("### ⚠️ Breaking Changes", breaking)

    grouped = group_commits_by_type(parsed)
    custom_types = sorted(t for t in grouped if t not in TYPE_LABELS)
    for commit_type in [*TYPE_LABELS, *custom_types]:
        # Breaking changes are already listed above.
        entries = [pc for pc in grouped.get(commit_type, []) if not pc.is_breaking]
        if entries:
            label = TYPE_LABELS.get(commit_type, f"### {commit_type.capitalize()}")
            add_group(label, entries)

    return "\n".join(lines).rstrip()


def write_changelog(path: Path, section: str) -> Path:
    """Insert a release section at the top of the changelog file.

    A new file gets a ``# Changelog`` header. In an existing file the
    section goes directly below that header when present, otherwise at
    the very top.

    Raises:
        ChangelogError: If the file cannot be read or written
    """
    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
    except (OSError, UnicodeDecodeError) as e:
        raise ChangelogError(f"Could not read {path}: {e}") from e

    if not existing.strip():
        content = f"{CHANGELOG_HEADER}\n\n{section}\n"
    elif existing.startswith(CHANGELOG_HEADER):
        header, _, rest = existing.partition("\n")
        content = f"{header}\n\n{section}\n\n{rest.lstrip()}"
    else:
        content = f"{section}\n\n{existing}"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    except OSError as e:
        raise ChangelogError(f"Could not write {path}: {e}") from e
    return path
