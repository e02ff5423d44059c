"""Pydantic models for the ``[tool.semrel]`` configuration section."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CommitsConfig(_Section):
    """How commit messages map to version bumps."""

    types_major: list[str] = Field(default_factory=list)
    types_minor: list[str] = Field(default_factory=lambda: ["feat"])
    types_patch: list[str] = Field(default_factory=lambda: ["fix"])
    breaking_pattern: str = r"^BREAKING[ -]CHANGE:"
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"]
    )

    @field_validator("types_major", "types_minor", "types_patch")
    @classmethod
    def _lowercase_types(cls, value: list[str]) -> list[str]:
        for commit_type in value:
            if not commit_type.isascii() or not commit_type.isalpha() or not commit_type.islower():
                raise ValueError(f"commit type '{commit_type}' must be lowercase letters only")
        return value

    @field_validator("breaking_pattern")
    @classmethod
    def _valid_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value


class ChangelogConfig(_Section):
    """Where and how the changelog is written."""

    path: Path = Path("CHANGELOG.md")
    include_scope: bool = True
    include_sha: bool = False


class BuildConfig(_Section):
    """External commands that refresh the lockfile and build the package."""

    lock_command: list[str] = Field(default_factory=lambda: ["uv", "lock"])
    build_command: list[str] = Field(default_factory=lambda: ["uv", "build"])
    lockfile: Path = Path("uv.lock")

    @field_validator("lock_command", "build_command")
    @classmethod
    def _non_empty_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("command must not be empty")
        return value


class SemrelConfig(_Section):
    """Root configuration model."""

    tag_prefix: str = "v"
    commit_message: str = "chore(release): {version}"
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    @field_validator("commit_message")
    @classmethod
    def _message_mentions_version(cls, value: str) -> str:
        if "{version}" not in value:
            raise ValueError("commit_message must contain the '{version}' placeholder")
        try:
            value.format(version="0.0.0")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"commit_message has an unsupported placeholder: {e}") from e
        return value

    def tag_name(self, version: object) -> str:
        return f"{self.tag_prefix}{version}"
