"""Pydantic models for release-stager configuration.

Two sources feed a release:

- ``[tool.release-stager]`` in pyproject.toml, describing how the
  project tags and branches (:class:`ReleaseStagerConfig`)
- build properties passed on the command line as ``-P key=value``,
  describing what this particular invocation wants (:class:`ReleaseProperties`)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TRUTHY_VALUES = frozenset({"true", "y", "yes", "1", "on"})

GIT_ROOT = "git.root"
DISABLE_GIT_CHECKS = "release.disableGitChecks"
TRAVIS_CI = "release.travisci"
USE_LAST_TAG = "release.useLastTag"
RELEASE_VERSION = "release.version"
RELEASE_SCOPE = "release.scope"


def to_boolean(value: Any) -> bool:
    """Interpret a property value the way build properties are usually read.

    Only a small set of affirmative strings count as true; anything
    else, including an empty string, is false.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


class ReleaseStagerConfig(BaseModel):
    """Project-level configuration from ``[tool.release-stager]``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    tag_prefix: str = "v"
    remote: str = "origin"
    tracking_ref: str = "origin/master"
    branch_suffix: str = "branch"
    release_branches: bool = True
    default_scope: Literal["major", "minor", "patch"] = "minor"


class ReleaseProperties(BaseModel):
    """Build properties recognized by the release pipeline.

    Field aliases are the dotted property names, so a mapping of raw
    ``-P`` options validates directly::

        ReleaseProperties.model_validate({"release.version": "1.2.3"})
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    git_root: Path | None = Field(default=None, alias=GIT_ROOT)
    disable_git_checks: bool = Field(default=False, alias=DISABLE_GIT_CHECKS)
    travisci: bool = Field(default=False, alias=TRAVIS_CI)
    use_last_tag: bool = Field(default=False, alias=USE_LAST_TAG)
    version: str | None = Field(default=None, alias=RELEASE_VERSION)
    scope: str | None = Field(default=None, alias=RELEASE_SCOPE)

    @field_validator("disable_git_checks", "travisci", "use_last_tag", mode="before")
    @classmethod
    def _coerce_boolean(cls, value: Any) -> bool:
        return to_boolean(value)

    @property
    def skip_git_checks(self) -> bool:
        """True when either opt-out property disables git-dependent checks."""
        return self.disable_git_checks or self.travisci

    def has_property(self, name: str) -> bool:
        """Return True if a property was supplied, whatever its value."""
        return name in self.supplied()

    def get_property(self, name: str) -> Any:
        """Return the raw value of a supplied property, or None."""
        return self.supplied().get(name)

    def supplied(self) -> dict[str, Any]:
        """Supplied properties keyed by their dotted names."""
        values = self.model_dump(by_alias=True, exclude_unset=True)
        values.update(self.model_extra or {})
        return values
