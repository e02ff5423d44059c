"""CLI entry point for semrel."""

from __future__ import annotations

import logging
import os

import click
from rich.console import Console
from rich.logging import RichHandler

from semrel import __version__
from semrel.cli.commands.release import run_release_command

CI_ENV_VAR = "CI"


def ci_env_set() -> bool:
    """True if the CI variable is present, whatever its value."""
    return CI_ENV_VAR in os.environ


def _configure_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    __version__,
    "--version",
    prog_name="semrel",
    message="%(prog)s 🚀 -- v%(version)s",
)
@click.option(
    "-p",
    "--path",
    type=click.Path(),
    default=".",
    show_default=True,
    help="Repository root.",
)
@click.option("-w", "--write", is_flag=True, help="Write the release instead of previewing it.")
@click.option("-v", "--verbose", is_flag=True, help="Log git and build commands.")
def main(path: str, write: bool, verbose: bool) -> None:
    """Release a package from its conventional commit history.

    Runs as a dry run unless --write is given. The CI environment
    variable, when set, always forces a dry run.
    """
    console = Console()
    err_console = Console(stderr=True)
    _configure_logging(verbose, err_console)

    run_release_command(path, write, ci_env_set(), console, err_console)
