"""Release pipeline.

Runs the steps of a release in a fixed order, stopping at the first
failure:

1. open the repository
2. reject protected branch names
3. determine the requested stage
4. require a clean tree for candidate and final releases
5. resolve the version through the strategy chain
6. tag (and branch), then push

Nothing is written to the repository before step 6, so a failed
check never leaves a partial release behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from release_stager.config.models import ReleaseProperties, ReleaseStagerConfig
from release_stager.core.checks import check_activation, check_stage
from release_stager.core.resolver import Resolution, resolve
from release_stager.core.stage import StageDecision, determine_stage
from release_stager.core.state import ReleaseContext, RepositoryState
from release_stager.core.strategies import UNCOMMITTED_VERSION
from release_stager.core.tagging import TagAndBranchStrategy, TagStrategy
from release_stager.exceptions import RepositoryNotFoundError
from release_stager.vcs.git import GitRepository

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from release_stager.core.strategies import VersionStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseOutcome:
    """Result of running the pipeline.

    Attributes:
        version: Resolved version
        stage: Build-wide ``release.stage`` marker, if a stage was requested
        status: Publication status (``candidate`` or ``release``), if any
        strategy_name: Name of the strategy that produced the version
        tag_name: Tag created by this run
        branch_name: Companion branch created by this run
        release_enabled: False when tagging and pushing are unavailable
    """

    version: str
    stage: str | None = None
    status: str | None = None
    strategy_name: str | None = None
    tag_name: str | None = None
    branch_name: str | None = None
    release_enabled: bool = True


class ReleasePipeline:
    """Infers the version for a project and optionally releases it.

    Args:
        path: Project directory
        properties: Build properties for this invocation
        config: Project configuration
        strategies: Version strategies in precedence order
    """

    def __init__(
        self,
        path: Path,
        properties: ReleaseProperties | None = None,
        config: ReleaseStagerConfig | None = None,
        strategies: Sequence[VersionStrategy] | None = None,
    ) -> None:
        self.path = path
        self.properties = properties or ReleaseProperties()
        self.config = config or ReleaseStagerConfig()
        self.strategies = strategies

    @property
    def git_root(self) -> Path:
        root = self.properties.git_root
        if root is None:
            return self.path
        return root if root.is_absolute() else self.path / root

    def tag_strategy(self) -> TagStrategy:
        if self.config.release_branches:
            return TagAndBranchStrategy(
                tag_prefix=self.config.tag_prefix,
                start_point=self.config.tracking_ref,
                branch_suffix=self.config.branch_suffix,
                remote=self.config.remote,
            )
        return TagStrategy(tag_prefix=self.config.tag_prefix)

    def open_repository(self) -> GitRepository | None:
        try:
            return GitRepository(self.git_root)
        except RepositoryNotFoundError:
            logger.warning(
                "Git repository not found at %s -- release tasks will not be available. "
                "Use the git.root property to specify a different directory.",
                self.git_root,
            )
            return None

    def prepare(self, repo: GitRepository, requested: Iterable[str]) -> tuple[ReleaseContext, Resolution]:
        """Run every check and resolve the version, without writing anything.

        Raises:
            PreconditionError: If the branch name or working tree is unacceptable
            ConfigurationError: If the request is inconsistent
        """
        state = RepositoryState.capture(repo)
        skip_checks = self.properties.skip_git_checks

        check_activation(state, skip=skip_checks)
        stage = determine_stage(requested)
        check_stage(state, stage.is_snapshot_release, skip=skip_checks)

        context = ReleaseContext(state=state, stage=stage, properties=self.properties, config=self.config)
        return context, resolve(context, self.strategies)

    def infer(self, requested: Iterable[str] = ()) -> ReleaseOutcome:
        """Resolve the version without tagging or pushing."""
        return self.run(requested, execute=False)

    def run(self, requested: Iterable[str] = (), *, execute: bool = True) -> ReleaseOutcome:
        """Run the pipeline.

        A missing repository is not an error: the placeholder version is
        returned with ``release_enabled`` set to False.

        Args:
            requested: Requested stage names
            execute: Tag and push when the resolved version asks for it

        Returns:
            What was resolved and created
        """
        repo = self.open_repository()
        if repo is None:
            return ReleaseOutcome(version=UNCOMMITTED_VERSION, release_enabled=False)

        context, resolution = self.prepare(repo, requested)
        release_enabled = resolution.tagging_enabled and not self.properties.skip_git_checks
        outcome = _outcome(context.stage, resolution, release_enabled)

        if not execute or not release_enabled or not resolution.version.create_tag:
            return outcome

        return self.release(context, resolution, outcome)

    def release(self, context: ReleaseContext, resolution: Resolution, outcome: ReleaseOutcome) -> ReleaseOutcome:
        tagger = self.tag_strategy()
        repo = context.repo

        request = tagger.build_request(repo, resolution.version)
        tagger.apply(repo, request)
        tag_name = request.name

        refspecs = [tag_name]
        branch = context.state.current_branch_name
        if branch != "HEAD":
            refspecs.insert(0, branch)
        repo.push(*refspecs, remote=self.config.remote)

        logger.info("Released %s", tag_name)
        return replace(outcome, tag_name=tag_name, branch_name=request.branch_name)


def _outcome(stage: StageDecision, resolution: Resolution, release_enabled: bool) -> ReleaseOutcome:
    return ReleaseOutcome(
        version=resolution.version.version,
        stage=stage.marker,
        status=stage.status,
        strategy_name=resolution.strategy_name,
        release_enabled=release_enabled,
    )
