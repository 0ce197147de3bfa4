"""Commit-derived SemVer strategies, one per release stage.

The version is computed from the nearest tags: the nearest normal
version is bumped by ``release.scope`` (``minor`` unless configured),
unless a pre-release of a later version is already tagged, in which
case that version's core is the target. Each stage then decorates
the target:

- ``FINAL``: ``1.3.0``
- ``PRE_RELEASE``: ``1.3.0-rc.2``
- ``SNAPSHOT``: ``1.3.0-SNAPSHOT``
- ``DEVELOPMENT``: ``1.3.0-dev.4+1a2b3c4`` (``dev.4.uncommitted`` when dirty)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_stager.config.models import RELEASE_SCOPE
from release_stager.core.locator import NearestVersion, NearestVersionLocator
from release_stager.core.stage import Stage
from release_stager.core.strategies import ReleaseVersion
from release_stager.core.version import BumpType, Version
from release_stager.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from release_stager.core.state import ReleaseContext

_RC_PATTERN = re.compile(r"^rc\.(\d+)$")


def scope_for(context: ReleaseContext) -> BumpType:
    """Return the bump scope requested for this release.

    Raises:
        ConfigurationError: If ``release.scope`` is not a known scope
    """
    raw = context.properties.get_property(RELEASE_SCOPE) or context.config.default_scope
    try:
        return BumpType.from_string(str(raw))
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def target_version(nearest: NearestVersion, scope: BumpType) -> Version:
    """The normal version the next release will carry."""
    bumped = nearest.normal.bump(scope)
    if nearest.any.is_prerelease and nearest.any.core > nearest.normal:
        return nearest.any.core
    return bumped


def _final(target: Version, nearest: NearestVersion, context: ReleaseContext) -> Version:
    return target


def _candidate(target: Version, nearest: NearestVersion, context: ReleaseContext) -> Version:
    number = 1
    if nearest.any.core == target and nearest.any.prerelease:
        match = _RC_PATTERN.match(nearest.any.prerelease)
        if match:
            number = int(match.group(1)) + 1
    return target.with_prerelease(f"rc.{number}")


def _snapshot(target: Version, nearest: NearestVersion, context: ReleaseContext) -> Version:
    return target.with_prerelease("SNAPSHOT")


def _development(target: Version, nearest: NearestVersion, context: ReleaseContext) -> Version:
    prerelease = f"dev.{nearest.distance_from_any}"
    if not context.state.working_tree_clean:
        prerelease += ".uncommitted"
    sha = context.repo.head_commit().short_sha
    return target.with_prerelease(prerelease).with_build(sha)


@dataclass(frozen=True)
class SemVerStrategy:
    """A strategy inferring the version for one release stage."""

    name: str
    stage: Stage
    create_tag: bool
    decorate: Callable[[Version, NearestVersion, ReleaseContext], Version]
    suppresses_release: bool = False

    def selector(self, context: ReleaseContext) -> bool:
        return context.stage.stage is self.stage

    def infer(self, context: ReleaseContext) -> ReleaseVersion:
        locator = NearestVersionLocator(context.config.tag_prefix)
        nearest = locator.locate(context.repo)
        target = target_version(nearest, scope_for(context))
        version = self.decorate(target, nearest, context)
        previous = str(nearest.normal) if nearest.normal_found else None
        return ReleaseVersion(str(version), previous, self.create_tag)


FINAL = SemVerStrategy("FINAL", Stage.FINAL, create_tag=True, decorate=_final)
PRE_RELEASE = SemVerStrategy("PRE_RELEASE", Stage.CANDIDATE, create_tag=True, decorate=_candidate)
SNAPSHOT = SemVerStrategy("SNAPSHOT", Stage.SNAPSHOT, create_tag=False, decorate=_snapshot)
DEVELOPMENT = SemVerStrategy("DEVELOPMENT", Stage.DEV_SNAPSHOT, create_tag=False, decorate=_development)
