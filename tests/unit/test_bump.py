"""Tests for the bump engine."""

from __future__ import annotations

import itertools

import pytest

from semrel.core.bump import apply_bump, decide
from semrel.core.commits import Severity
from semrel.core.version import Version

BUMPS = [Severity.PATCH, Severity.MINOR, Severity.MAJOR]
VERSIONS = [Version(0, 0, 0), Version(0, 9, 0), Version(1, 2, 3), Version(10, 0, 99)]


class TestDecide:
    """Tests for decide()."""

    def test_empty_is_unknown(self):
        assert decide([]) == Severity.UNKNOWN

    def test_only_unknown(self):
        assert decide([Severity.UNKNOWN, Severity.UNKNOWN]) == Severity.UNKNOWN

    def test_maximum_wins(self):
        assert decide([Severity.PATCH, Severity.MAJOR, Severity.MINOR]) == Severity.MAJOR

    def test_minor_beats_patch(self):
        assert decide([Severity.PATCH, Severity.MINOR, Severity.PATCH]) == Severity.MINOR

    def test_accepts_generator(self):
        assert decide(s for s in [Severity.PATCH]) == Severity.PATCH

    def test_order_does_not_matter(self):
        """Every permutation of the same severities gives the same result."""
        severities = [Severity.UNKNOWN, Severity.PATCH, Severity.MINOR, Severity.PATCH]
        results = {decide(p) for p in itertools.permutations(severities)}
        assert results == {Severity.MINOR}

    def test_associative(self):
        """Deciding sub-ranges first gives the same result as the whole range."""
        left = [Severity.PATCH, Severity.UNKNOWN]
        right = [Severity.MINOR]
        assert decide([decide(left), decide(right)]) == decide(left + right)


class TestApplyBump:
    """Tests for apply_bump()."""

    def test_unknown_is_none(self):
        for version in VERSIONS:
            assert apply_bump(version, Severity.UNKNOWN) is None

    def test_patch(self):
        assert apply_bump(Version(1, 2, 3), Severity.PATCH) == Version(1, 2, 4)

    def test_minor_resets_patch(self):
        assert apply_bump(Version(1, 2, 3), Severity.MINOR) == Version(1, 3, 0)

    def test_major_resets_minor_and_patch(self):
        assert apply_bump(Version(0, 9, 0), Severity.MAJOR) == Version(1, 0, 0)

    @pytest.mark.parametrize("version", VERSIONS)
    @pytest.mark.parametrize("bump", BUMPS)
    def test_result_is_strictly_greater(self, version: Version, bump: Severity):
        new_version = apply_bump(version, bump)

        assert new_version is not None
        assert new_version > version

    @pytest.mark.parametrize("version", VERSIONS)
    def test_components_right_of_bump_are_zero(self, version: Version):
        major = apply_bump(version, Severity.MAJOR)
        minor = apply_bump(version, Severity.MINOR)

        assert (major.minor, major.patch) == (0, 0)
        assert minor.patch == 0
        assert minor.major == version.major

    def test_does_not_mutate_input(self):
        version = Version(1, 2, 3)
        apply_bump(version, Severity.MAJOR)
        assert version == Version(1, 2, 3)
