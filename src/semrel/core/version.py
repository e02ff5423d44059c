"""Semantic version value type.

Versions are plain ``major.minor.patch`` triples. Pre-release and build
metadata are not supported: a manifest carrying them is rejected as
invalid input rather than silently truncated.
"""

from __future__ import annotations

from dataclasses import dataclass

from semrel.exceptions import InvalidVersionError


def _parse_component(text: str, original: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise InvalidVersionError(f"Invalid version '{original}': '{text}' is not a number")
    if len(text) > 1 and text.startswith("0"):
        raise InvalidVersionError(
            f"Invalid version '{original}': '{text}' has a leading zero"
        )
    return int(text)


@dataclass(frozen=True, order=True)
class Version:
    """An immutable semantic version.

    Ordering follows semantic-version precedence, which for plain
    triples is the tuple order of the components.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidVersionError(
                    f"Version component '{name}' must be a non-negative integer, got {value!r}"
                )

    @classmethod
    def parse(cls, text: str, *, allow_prefix: bool = True) -> Version:
        """Parse a ``major.minor.patch`` string.

        Surrounding whitespace is accepted, and so is a single leading
        ``v`` (as in tag names) unless ``allow_prefix`` is False.

        Raises:
            InvalidVersionError: If the string is not a valid version
        """
        cleaned = text.strip()
        if allow_prefix and cleaned.startswith("v"):
            cleaned = cleaned[1:]

        parts = cleaned.split(".")
        if len(parts) != 3:
            raise InvalidVersionError(
                f"Invalid version '{text}': expected major.minor.patch"
            )

        major, minor, patch = (_parse_component(part, text) for part in parts)
        return cls(major, minor, patch)

    def bump_major(self) -> Version:
        return Version(self.major + 1, 0, 0)

    def bump_minor(self) -> Version:
        return Version(self.major, self.minor + 1, 0)

    def bump_patch(self) -> Version:
        return Version(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)
