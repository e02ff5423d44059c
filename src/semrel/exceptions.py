"""Exception hierarchy for semrel.

Every error raised by semrel derives from :class:`SemrelError`, so the
CLI can report any failure with a single handler and exit with code 1.
Errors wrapping an external command keep its diagnostic output in
``stderr``.
"""

from __future__ import annotations


class SemrelError(Exception):
    """Base class for all semrel errors."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}\n{self.stderr.strip()}"
        return self.message


# Configuration


class ConfigError(SemrelError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml in the repository."""


class ConfigValidationError(ConfigError):
    """The [tool.semrel] section is invalid."""


# Project manifest


class ProjectError(SemrelError):
    """Reading or updating the project manifest failed."""


class VersionNotFoundError(ProjectError):
    """The manifest does not declare a version."""


class InvalidVersionError(ProjectError):
    """A version string is not a valid major.minor.patch version."""


# Version control


class GitError(SemrelError):
    """A git command failed."""


class RepositoryNotFoundError(GitError):
    """The path is not a git repository."""


class SignatureError(GitError):
    """The committer name or email address could not be resolved."""


# Release artifacts


class ChangelogError(SemrelError):
    """Rendering or writing the changelog failed."""


class BuildToolError(SemrelError):
    """The external build tool failed or is not installed."""


class StepFailedError(SemrelError):
    """A release step failed after earlier steps may have completed."""

    def __init__(self, step: str, cause: BaseException) -> None:
        stderr = getattr(cause, "stderr", None)
        message = getattr(cause, "message", None) or str(cause)
        super().__init__(f"Release step '{step}' failed: {message}", stderr=stderr)
        self.step = step
        self.cause = cause
