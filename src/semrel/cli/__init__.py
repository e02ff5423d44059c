"""Command-line interface for semrel."""

from __future__ import annotations

from semrel.cli.app import main

__all__ = ["main"]
