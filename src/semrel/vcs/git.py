"""Git repository access.

A thin wrapper around the ``git`` executable. Every command runs with
``subprocess.run`` in the repository directory; a non-zero exit raises
:class:`GitError` carrying git's stderr.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from semrel.core.version import Version
from semrel.exceptions import (
    GitError,
    InvalidVersionError,
    RepositoryNotFoundError,
    SignatureError,
)

logger = logging.getLogger(__name__)

# Separators for `git log` output: unit separator between fields,
# record separator between commits.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP

SIGNATURE_HELP = """\
A release commit needs a committer name and email address.
We tried fetching it from different locations, but couldn't find one.

Committer information is taken from the following environment variables, if set:

GIT_COMMITTER_NAME
GIT_COMMITTER_EMAIL

If none is set the normal git config is tried in the following order:

Local repository config
User config
Global config"""


@dataclass(frozen=True)
class Commit:
    """A commit in the analyzed range."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def subject(self) -> str:
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True)
class Signature:
    """Identity used for the release commit and tag."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class GitRepository:
    """A git working tree rooted at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        if not self.path.is_dir():
            raise RepositoryNotFoundError(
                f"Could not open the git repository: {self.path} is not a directory"
            )
        try:
            self._run("rev-parse", "--git-dir")
        except GitError as e:
            raise RepositoryNotFoundError(
                f"Could not open the git repository at {self.path}", stderr=e.stderr
            ) from e

    def _run(
        self,
        *args: str,
        check: bool = True,
        env: dict[str, str] | None = None,
        strip: bool = True,
    ) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s in %s", cmd, self.path)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=self.path,
                env=env,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(
                f"git {args[0]} failed with exit code {result.returncode}",
                stderr=result.stderr,
            )
        return result.stdout.strip() if strip else result.stdout

    def _config_value(self, key: str) -> str | None:
        # `git config` checks repository, global and system config in turn.
        value = self._run("config", "--get", key, check=False)
        return value or None

    def resolve_signature(self) -> Signature:
        """Resolve the committer identity for the release commit.

        Raises:
            SignatureError: If no name or email can be found
        """
        name = os.environ.get("GIT_COMMITTER_NAME") or self._config_value("user.name")
        email = os.environ.get("GIT_COMMITTER_EMAIL") or self._config_value("user.email")

        missing = [label for label, value in (("name", name), ("email", email)) if not value]
        if missing:
            raise SignatureError(
                f"Failed to get the committer's {' and '.join(missing)}",
                stderr=SIGNATURE_HELP,
            )
        return Signature(name=name, email=email)  # type: ignore[arg-type]

    def get_latest_tag(self, prefix: str = "v") -> str | None:
        """Return the highest release tag, or None if there is none.

        Only tags of the form ``<prefix>X.Y.Z`` count as releases.
        """
        output = self._run("tag", "--list", f"{prefix}*", check=False)
        releases: list[tuple[Version, str]] = []
        for tag in output.splitlines():
            tag = tag.strip()
            try:
                releases.append((Version.parse(tag[len(prefix) :], allow_prefix=False), tag))
            except InvalidVersionError:
                logger.debug("Ignoring non-release tag %s", tag)

        if not releases:
            return None
        return max(releases)[1]

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        """List commits reachable from HEAD but not from ``tag``.

        With no tag, the whole history of HEAD is returned. Commits are
        newest first.
        """
        revision = f"{tag}..HEAD" if tag else "HEAD"
        output = self._run("log", f"--format={_LOG_FORMAT}", revision, strip=False)

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, date, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.strip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(date),
                )
            )
        logger.debug("Found %d commits in %s", len(commits), revision)
        return commits

    def _identity_env(self, signature: Signature) -> dict[str, str]:
        return {
            **os.environ,
            "GIT_AUTHOR_NAME": signature.name,
            "GIT_AUTHOR_EMAIL": signature.email,
            "GIT_COMMITTER_NAME": signature.name,
            "GIT_COMMITTER_EMAIL": signature.email,
        }

    def commit_files(self, paths: list[Path], message: str, signature: Signature) -> str:
        """Stage ``paths`` and commit them. Returns the new commit sha."""
        self._run("add", "--", *(str(p) for p in paths))
        self._run("commit", "--no-verify", "-m", message, env=self._identity_env(signature))
        return self._run("rev-parse", "HEAD")

    def create_tag(self, name: str, message: str, signature: Signature) -> None:
        """Create an annotated tag on HEAD."""
        # Verbatim cleanup keeps Markdown headings, which git would otherwise
        # strip as comment lines.
        self._run(
            "tag",
            "--annotate",
            "--cleanup=verbatim",
            name,
            "-m",
            message,
            env=self._identity_env(signature),
        )
