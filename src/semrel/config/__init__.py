"""Configuration management for semrel."""

from __future__ import annotations

from semrel.config.loader import load_config
from semrel.config.models import (
    BuildConfig,
    ChangelogConfig,
    CommitsConfig,
    SemrelConfig,
)

__all__ = [
    "BuildConfig",
    "ChangelogConfig",
    "CommitsConfig",
    "SemrelConfig",
    "load_config",
]
