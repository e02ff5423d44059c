"""Implementation of the release command.

Without ``--write`` (or inside CI) this only previews the release.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from semrel.core.release import run_release

if TYPE_CHECKING:
    from rich.console import Console


def run_release_command(
    path: str | None,
    write: bool,
    ci: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Repository root, defaults to the current directory
        write: Whether to persist the release
        ci: Whether a CI environment was detected at startup
        console: Console for standard output
        err_console: Console for error output

    Raises:
        SystemExit: With code 1 if any stage of the pipeline failed
    """
    project_path = Path(path) if path else Path.cwd()

    console.print("[bold]semrel[/] 🚀")
    result = run_release(
        project_path,
        write=write,
        ci=ci,
        console=console,
        err_console=err_console,
    )

    if not result.ok:
        raise SystemExit(1)
