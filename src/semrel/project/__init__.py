"""Project manifest and build tooling."""

from __future__ import annotations

from semrel.project.build import build_package, update_lockfile
from semrel.project.pyproject import get_pyproject_version, update_pyproject_version

__all__ = [
    "build_package",
    "get_pyproject_version",
    "update_lockfile",
    "update_pyproject_version",
]
