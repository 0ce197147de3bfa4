"""Tag creation and release notes.

:class:`TagStrategy` turns an inferred :class:`ReleaseVersion` into an
annotated tag whose message lists the commits since the previous
release. :class:`TagAndBranchStrategy` additionally creates a
``<tag>-branch`` branch tracking the upstream trunk before tagging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from release_stager.core.strategies import ReleaseVersion
    from release_stager.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagRequest:
    """What will be written to the repository for one release.

    Attributes:
        name: Tag name
        branch_name: Companion branch to create, if any
        message: Annotated tag message
        push_all: Whether all branches are pushed before tagging
        start_point: Ref the companion branch starts from and tracks
        remote: Remote that branches are pushed to
    """

    name: str
    branch_name: str | None
    message: str
    push_all: bool = False
    start_point: str | None = None
    remote: str = "origin"


def generate_message(repo: GitRepository, version: ReleaseVersion, tag_prefix: str = "v") -> str:
    """Build release notes for ``version``.

    The message starts with ``Release of <version>``. When a previous
    version is known, one ``- <sha>: <subject>`` line follows for each
    commit since that version's tag. If the tag does not exist the
    walk is not limited and every commit reachable from HEAD is listed.

    Args:
        repo: Repository to read history from
        version: Inferred release version
        tag_prefix: Prefix of version tags

    Returns:
        Tag message
    """
    lines = [f"Release of {version.version}", ""]

    if version.previous_version:
        previous = f"{tag_prefix}{version.previous_version}^{{commit}}"
        excludes = []
        if repo.tag_exists(previous):
            excludes.append(previous)
        else:
            logger.debug("Previous tag %s not found; listing full history", previous)

        lines.extend(f"- {commit.short_sha}: {commit.short_message}" for commit in repo.log(["HEAD"], excludes))

    return "\n".join(lines) + "\n"


class TagStrategy:
    """Creates the release tag.

    Args:
        tag_prefix: Prepended to the version to form the tag name
    """

    def __init__(self, *, tag_prefix: str = "v") -> None:
        self.tag_prefix = tag_prefix

    def to_tag_string(self, version: str) -> str:
        return f"{self.tag_prefix}{version}"

    def generate_message(self, repo: GitRepository, version: ReleaseVersion) -> str:
        return generate_message(repo, version, self.tag_prefix)

    def build_request(self, repo: GitRepository, version: ReleaseVersion) -> TagRequest:
        return TagRequest(
            name=self.to_tag_string(version.version),
            branch_name=None,
            message=self.generate_message(repo, version),
        )

    def apply(self, repo: GitRepository, request: TagRequest) -> None:
        """Write ``request`` to the repository.

        The companion branch is created and pushed before the tag.
        """
        if request.branch_name:
            repo.branch_add(request.branch_name, request.start_point or "HEAD", track=True)
        if request.push_all:
            repo.push(remote=request.remote, all_branches=True)
        repo.create_tag(request.name, request.message)

    def maybe_create_tag(self, repo: GitRepository, version: ReleaseVersion) -> str | None:
        """Create the tag if ``version`` asks for one.

        Returns:
            Name of the created tag, or None
        """
        if not version.create_tag:
            return None

        request = self.build_request(repo, version)
        self.apply(repo, request)
        return request.name


class TagAndBranchStrategy(TagStrategy):
    """Tag strategy that also creates a tracking branch for each release.

    Args:
        start_point: Upstream ref the branch starts from and tracks
        branch_suffix: Appended to the tag name, after a dash
        remote: Remote to push branches to
    """

    def __init__(
        self,
        *,
        tag_prefix: str = "v",
        start_point: str = "origin/master",
        branch_suffix: str = "branch",
        remote: str = "origin",
    ) -> None:
        super().__init__(tag_prefix=tag_prefix)
        self.start_point = start_point
        self.branch_suffix = branch_suffix
        self.remote = remote

    def branch_name_for(self, tag_name: str) -> str:
        return f"{tag_name}-{self.branch_suffix}"

    def build_request(self, repo: GitRepository, version: ReleaseVersion) -> TagRequest:
        request = super().build_request(repo, version)
        return replace(
            request,
            branch_name=self.branch_name_for(request.name),
            push_all=True,
            start_point=self.start_point,
            remote=self.remote,
        )
