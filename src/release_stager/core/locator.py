"""Nearest version lookup over tag history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_stager.core.version import ZERO, Version
from release_stager.exceptions import VersionParseError

if TYPE_CHECKING:
    from release_stager.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NearestVersion:
    """Closest version tags reachable from HEAD.

    Attributes:
        normal: Nearest version without a pre-release component
        any: Nearest version of any kind
        distance_from_normal: Commits between ``normal`` and HEAD
        distance_from_any: Commits between ``any`` and HEAD
        found: Whether any version tag was found at all
    """

    normal: Version
    any: Version
    distance_from_normal: int
    distance_from_any: int
    found: bool = True

    @property
    def normal_found(self) -> bool:
        return self.found and self.normal != ZERO


class NearestVersionLocator:
    """Finds the nearest version tags relative to HEAD.

    Only tags starting with ``tag_prefix`` whose remainder parses as a
    semantic version are considered. Nearest means fewest commits
    between the tag and HEAD; ties go to the higher version.
    """

    def __init__(self, tag_prefix: str = "v") -> None:
        self.tag_prefix = tag_prefix

    def parse_tag(self, tag: str) -> Version | None:
        if not tag.startswith(self.tag_prefix):
            return None
        try:
            return Version.parse(tag.removeprefix(self.tag_prefix))
        except VersionParseError:
            return None

    def locate(self, repo: GitRepository) -> NearestVersion:
        """Locate the nearest normal and any version for ``repo``'s HEAD."""
        candidates: list[tuple[int, Version]] = []
        for tag in repo.tags_merged_into("HEAD"):
            version = self.parse_tag(tag)
            if version is None:
                continue
            distance = repo.count_commits(["HEAD"], [f"{tag}^{{commit}}"])
            candidates.append((distance, version))

        if not candidates:
            total = repo.count_commits(["HEAD"])
            logger.debug("No version tags found; %d commits since root", total)
            return NearestVersion(ZERO, ZERO, total, total, found=False)

        def nearest(pool: list[tuple[int, Version]]) -> tuple[int, Version]:
            return min(pool, key=lambda item: (item[0], _Descending(item[1])))

        any_distance, any_version = nearest(candidates)
        normals = [item for item in candidates if not item[1].is_prerelease]
        if normals:
            normal_distance, normal_version = nearest(normals)
        else:
            normal_distance, normal_version = repo.count_commits(["HEAD"]), ZERO

        logger.debug("Nearest version: any=%s normal=%s", any_version, normal_version)
        return NearestVersion(normal_version, any_version, normal_distance, any_distance)


class _Descending:
    """Sort key wrapper reversing version order."""

    __slots__ = ("version",)

    def __init__(self, version: Version) -> None:
        self.version = version

    def __lt__(self, other: _Descending) -> bool:
        return other.version < self.version

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Descending) and other.version == self.version
