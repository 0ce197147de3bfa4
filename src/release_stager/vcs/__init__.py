"""Version control access."""

from __future__ import annotations

from release_stager.vcs.git import Commit, GitRepository, WorkingTreeStatus

__all__ = [
    "Commit",
    "GitRepository",
    "WorkingTreeStatus",
]
