"""Semantic version values.

Parsing and precedence rules come from the ``semver`` package; this
module adds the handful of operations release inference needs.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import StrEnum

import semver

from release_stager.exceptions import VersionParseError


class BumpType(StrEnum):
    """Which component of a version a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def from_string(cls, value: str) -> BumpType:
        """Parse a scope name, case-insensitively.

        Raises:
            ValueError: If ``value`` is not a known scope
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown scope {value!r}, expected one of: {choices}") from None


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """An immutable semantic version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string such as ``1.2.3-rc.1+abc123``.

        Raises:
            VersionParseError: If ``value`` is not a valid semantic version
        """
        try:
            info = semver.Version.parse(value.strip())
        except (ValueError, TypeError) as e:
            raise VersionParseError(f"Invalid version: {value!r}") from e
        return cls(info.major, info.minor, info.patch, info.prerelease, info.build)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return semver.Version.is_valid(value.strip())

    def _info(self) -> semver.Version:
        return semver.Version(self.major, self.minor, self.patch, self.prerelease, self.build)

    def __str__(self) -> str:
        return str(self._info())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._info() < other._info()

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def core(self) -> Version:
        """This version without pre-release or build metadata."""
        return Version(self.major, self.minor, self.patch)

    def bump(self, bump_type: BumpType) -> Version:
        """Increment one component, resetting the lower ones."""
        if bump_type is BumpType.MAJOR:
            return Version(self.major + 1)
        if bump_type is BumpType.MINOR:
            return Version(self.major, self.minor + 1)
        return Version(self.major, self.minor, self.patch + 1)

    def with_prerelease(self, prerelease: str | None) -> Version:
        return Version(self.major, self.minor, self.patch, prerelease, self.build)

    def with_build(self, build: str | None) -> Version:
        return Version(self.major, self.minor, self.patch, self.prerelease, build)


ZERO = Version(0, 0, 0)
