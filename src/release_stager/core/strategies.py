"""Version strategies that let the user override inference.

A strategy has a ``name``, a ``selector`` deciding whether it applies
to the current release, and an ``infer`` producing the version. The
strategies in this module express explicit user intent and are
registered ahead of the commit-derived SemVer strategies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from release_stager.config.models import RELEASE_VERSION, USE_LAST_TAG, to_boolean
from release_stager.core.locator import NearestVersionLocator
from release_stager.core.version import Version
from release_stager.exceptions import ConfigurationError

if TYPE_CHECKING:
    from release_stager.core.state import ReleaseContext

logger = logging.getLogger(__name__)

UNCOMMITTED_VERSION = "0.1.0-dev.0.uncommitted"


@dataclass(frozen=True)
class ReleaseVersion:
    """The outcome of version inference.

    Attributes:
        version: Resolved version string
        previous_version: Nearest prior version, if known
        create_tag: Whether the release should be tagged
    """

    version: str
    previous_version: str | None = None
    create_tag: bool = False

    def __post_init__(self) -> None:
        if not self.version or not self.version.strip():
            raise ValueError("ReleaseVersion requires a non-empty version")


@runtime_checkable
class VersionStrategy(Protocol):
    """Protocol implemented by every version strategy."""

    @property
    def name(self) -> str: ...

    def selector(self, context: ReleaseContext) -> bool:
        """Return True if this strategy should infer the version."""
        ...

    def infer(self, context: ReleaseContext) -> ReleaseVersion:
        """Infer the version for ``context``."""
        ...


class NoCommitStrategy:
    """Placeholder version for a repository without any commits."""

    name = "no-commit"
    suppresses_release = False

    def selector(self, context: ReleaseContext) -> bool:
        return not context.state.has_commits

    def infer(self, context: ReleaseContext) -> ReleaseVersion:
        return ReleaseVersion(UNCOMMITTED_VERSION, None, False)


class ReleaseLastTagStrategy:
    """Re-release the version of the nearest existing tag.

    The tag already exists, so selecting this strategy also suppresses
    tagging and pushing for the rest of the pipeline.
    """

    name = "use-last-tag"
    suppresses_release = True

    def __init__(self, property_name: str = USE_LAST_TAG) -> None:
        self.property_name = property_name

    def selector(self, context: ReleaseContext) -> bool:
        selected = to_boolean(context.properties.get_property(self.property_name))
        if selected:
            logger.info("Using last tag; tagging is disabled for this release")
        return selected

    def infer(self, context: ReleaseContext) -> ReleaseVersion:
        locator = NearestVersionLocator(context.config.tag_prefix)
        nearest = locator.locate(context.repo)
        return ReleaseVersion(str(nearest.any), None, False)


class PropertyStrategy:
    """Use a version passed explicitly as a build property."""

    name = "version-property"
    suppresses_release = False

    def __init__(self, property_name: str = RELEASE_VERSION) -> None:
        self.property_name = property_name

    def selector(self, context: ReleaseContext) -> bool:
        return context.properties.has_property(self.property_name)

    def infer(self, context: ReleaseContext) -> ReleaseVersion:
        requested = context.properties.get_property(self.property_name)
        if requested is None or not str(requested).strip():
            raise ConfigurationError(f"Supplied {self.property_name} is empty")

        requested = str(requested).strip()
        if not Version.is_valid(requested):
            raise ConfigurationError(f"Supplied {self.property_name} is not a valid version: {requested!r}")

        return ReleaseVersion(requested, None, True)
