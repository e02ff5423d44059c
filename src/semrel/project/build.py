"""Lockfile refresh and package build via the external build tool.

The commands come from ``[tool.semrel.build]`` and default to ``uv lock``
and ``uv build``. They run as subprocesses in the repository root and
their output is captured so a failure can be reported with the tool's
own diagnostics.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from semrel.exceptions import BuildToolError

if TYPE_CHECKING:
    from pathlib import Path

    from semrel.config.models import BuildConfig

logger = logging.getLogger(__name__)


def _run_tool(args: list[str], cwd: Path) -> str:
    logger.debug("Running %s in %s", args, cwd)
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except FileNotFoundError as e:
        raise BuildToolError(f"{args[0]} not found. Is it installed and on PATH?") from e
    except subprocess.CalledProcessError as e:
        raise BuildToolError(
            f"`{' '.join(args)}` failed with exit code {e.returncode}",
            stderr=e.stderr or e.stdout,
        ) from e
    return result.stdout.strip()


def update_lockfile(path: Path, config: BuildConfig) -> Path:
    """Regenerate the dependency lockfile. Returns the lockfile path."""
    _run_tool(config.lock_command, path)
    return path / config.lockfile


def build_package(path: Path, config: BuildConfig) -> str:
    """Build the distributable package. Returns the tool's output."""
    return _run_tool(config.build_command, path)
