"""pyproject.toml version manipulation.

This module reads and rewrites the version declared in pyproject.toml.

It preserves formatting and comments by using regex-based
replacement rather than full TOML parsing and rewriting.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from semrel.config.loader import find_pyproject_toml
from semrel.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

# Sections that may carry the version: PEP 621 first, then Poetry.
_SECTIONS = (r"\[project\]", r"\[tool\.poetry\]")
_VERSION_LINE = r'^(version\s*=\s*)["\']([^"\']+)["\']'


def _section_pattern(header: str) -> str:
    # The section body runs up to the next table header or EOF.
    return rf"^{header}[ \t]*$.*?(?=^\[|\Z)"


def _read(pyproject_path: Path) -> str:
    try:
        return pyproject_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectError(f"Could not read {pyproject_path}: {e}") from e


def get_pyproject_version(path: Path) -> str:
    """Get the version from pyproject.toml.

    Args:
        path: Path to pyproject.toml or the directory containing it

    Returns:
        Version string

    Raises:
        ConfigNotFoundError: If pyproject.toml does not exist
        VersionNotFoundError: If version cannot be found
    """
    pyproject_path = find_pyproject_toml(path)
    content = _read(pyproject_path)

    for header in _SECTIONS:
        section = re.search(_section_pattern(header), content, re.MULTILINE | re.DOTALL)
        if section is None:
            continue
        match = re.search(_VERSION_LINE, section.group(0), re.MULTILINE)
        if match:
            return match.group(2)

    raise VersionNotFoundError(
        f"Could not find version in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def update_pyproject_version(path: Path, new_version: str) -> Path:
    """Update the version in pyproject.toml.

    Only the first ``version = "..."`` line of the matching section is
    rewritten; everything else is left byte-for-byte intact.

    Args:
        path: Path to pyproject.toml or the directory containing it
        new_version: New version string to set

    Returns:
        Path to the updated pyproject.toml

    Raises:
        VersionNotFoundError: If version cannot be found
        ProjectError: If the version is already ``new_version``
    """
    pyproject_path = find_pyproject_toml(path)
    content = _read(pyproject_path)

    def replace_version(match: re.Match[str]) -> str:
        return re.sub(
            _VERSION_LINE,
            rf'\g<1>"{new_version}"',
            match.group(0),
            count=1,
            flags=re.MULTILINE,
        )

    for header in _SECTIONS:
        section = re.search(_section_pattern(header), content, re.MULTILINE | re.DOTALL)
        if section is None or not re.search(_VERSION_LINE, section.group(0), re.MULTILINE):
            continue

        new_content = content[: section.start()] + replace_version(section) + content[section.end() :]
        if new_content == content:
            raise ProjectError(
                f"Version in {pyproject_path} was not updated. It may already be {new_version}."
            )
        pyproject_path.write_text(new_content)
        return pyproject_path

    raise VersionNotFoundError(
        f"Could not find version to update in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )
