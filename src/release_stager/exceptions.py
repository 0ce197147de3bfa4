"""Exception hierarchy for release-stager.

Every error raised on purpose by the library derives from
:class:`ReleaseStagerError`, so the CLI can report them uniformly
and abort with a non-zero exit code.
"""

from __future__ import annotations


class ReleaseStagerError(Exception):
    """Base class for all release-stager errors."""


# Configuration


class ConfigError(ReleaseStagerError):
    """Base class for configuration problems."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be found."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class ConfigurationError(ConfigError):
    """The requested release is inconsistent.

    Raised for mutually exclusive stages or an empty explicit version.
    Nothing has been written to the repository when this is raised.
    """


# Preconditions


class PreconditionError(ReleaseStagerError):
    """The repository is not in a state that allows the requested release."""


# Version control


class GitError(ReleaseStagerError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base


class RepositoryNotFoundError(GitError):
    """No git repository exists at the configured root."""


# Versions


class VersionParseError(ReleaseStagerError):
    """A string could not be parsed as a semantic version."""
