"""Read-only views of the repository and the current release request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from release_stager.config.models import ReleaseProperties, ReleaseStagerConfig
from release_stager.core.stage import StageDecision

if TYPE_CHECKING:
    from release_stager.vcs.git import GitRepository, WorkingTreeStatus


@dataclass(frozen=True)
class RepositoryState:
    """Snapshot of the repository taken before any strategy runs.

    History (tags, commits) is still queried on demand through ``repo``.
    """

    repo: GitRepository
    current_branch_name: str
    has_commits: bool
    status: WorkingTreeStatus

    @property
    def working_tree_clean(self) -> bool:
        return self.status.is_clean

    @classmethod
    def capture(cls, repo: GitRepository) -> RepositoryState:
        return cls(
            repo=repo,
            current_branch_name=repo.current_branch_name(),
            has_commits=repo.has_commits(),
            status=repo.status(),
        )


@dataclass(frozen=True)
class ReleaseContext:
    """Everything a version strategy may look at."""

    state: RepositoryState
    stage: StageDecision = field(default_factory=lambda: StageDecision(None, True))
    properties: ReleaseProperties = field(default_factory=ReleaseProperties)
    config: ReleaseStagerConfig = field(default_factory=ReleaseStagerConfig)

    @property
    def repo(self) -> GitRepository:
        return self.state.repo
