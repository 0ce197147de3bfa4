"""Preconditions that must hold before a release is made."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from release_stager.exceptions import PreconditionError

if TYPE_CHECKING:
    from release_stager.core.state import RepositoryState
    from release_stager.vcs.git import WorkingTreeStatus

logger = logging.getLogger(__name__)

# release/<major> and release/<major>.<minor> are reserved for version calculation
PROTECTED_BRANCH_PATTERN = re.compile(r"release/\d+(\.\d+)?")

BAD_BRANCH_MESSAGE = (
    "Branches with pattern release/<version> are used to calculate versions. "
    "The version must be of form: <major>.x, <major>.<minor>.x, or <major>.<minor>.<patch>"
)
UNCOMMITTED_CHANGES_MESSAGE = "Final and candidate builds require all changes to be committed into Git."


def check_branch_name(branch_name: str) -> None:
    """Reject branch names reserved for version calculation.

    Raises:
        PreconditionError: If ``branch_name`` is ``release/<n>`` or ``release/<n>.<n>``
    """
    if PROTECTED_BRANCH_PATTERN.fullmatch(branch_name):
        raise PreconditionError(BAD_BRANCH_MESSAGE)


def check_clean_tree(status: WorkingTreeStatus, is_snapshot_release: bool) -> None:
    """Require a clean working tree for candidate and final releases.

    Raises:
        PreconditionError: If a non-snapshot release has uncommitted changes
    """
    if is_snapshot_release:
        return
    if status.staged or status.unstaged:
        logger.debug("Staged: %s; unstaged: %s", status.staged, status.unstaged)
        raise PreconditionError(UNCOMMITTED_CHANGES_MESSAGE)


def check_activation(state: RepositoryState, *, skip: bool = False) -> None:
    """Checks that run before the stage is known.

    Raises:
        PreconditionError: If the current branch name is reserved
    """
    if skip:
        logger.info("Git checks disabled; tagging and pushing are skipped")
        return
    check_branch_name(state.current_branch_name)


def check_stage(state: RepositoryState, is_snapshot_release: bool, *, skip: bool = False) -> None:
    """Checks that depend on the requested stage.

    Raises:
        PreconditionError: If a non-snapshot release has uncommitted changes
    """
    if skip:
        return
    check_clean_tree(state.status, is_snapshot_release)

