"""Reducing commit severities to a single version bump."""

from __future__ import annotations

from collections.abc import Iterable

from semrel.core.commits import Severity
from semrel.core.version import Version


def decide(severities: Iterable[Severity]) -> Severity:
    """Return the aggregate bump for a range of commits.

    This is the most severe entry, so one breaking commit anywhere in the
    range forces a major release. An empty range is ``UNKNOWN``.
    """
    return max(severities, default=Severity.UNKNOWN)


def apply_bump(version: Version, bump: Severity) -> Version | None:
    """Derive the next version, or None when there is nothing to release."""
    if bump == Severity.MAJOR:
        return version.bump_major()
    if bump == Severity.MINOR:
        return version.bump_minor()
    if bump == Severity.PATCH:
        return version.bump_patch()
    return None
