"""Strategy chain resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_stager.core import stage_strategies
from release_stager.core.strategies import (
    NoCommitStrategy,
    PropertyStrategy,
    ReleaseLastTagStrategy,
    ReleaseVersion,
    VersionStrategy,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_stager.core.state import ReleaseContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """The strategy that won and the version it inferred."""

    strategy: VersionStrategy
    version: ReleaseVersion

    @property
    def strategy_name(self) -> str:
        return self.strategy.name

    @property
    def tagging_enabled(self) -> bool:
        """False when the winning strategy disables tagging and pushing."""
        return not getattr(self.strategy, "suppresses_release", False)


def default_strategies() -> list[VersionStrategy]:
    """The built-in strategies in precedence order.

    Overrides come first so an explicit request always beats a version
    derived from commits.
    """
    return [
        NoCommitStrategy(),
        ReleaseLastTagStrategy(),
        PropertyStrategy(),
        stage_strategies.SNAPSHOT,
        stage_strategies.DEVELOPMENT,
        stage_strategies.PRE_RELEASE,
        stage_strategies.FINAL,
    ]


def select_strategy(
    context: ReleaseContext,
    strategies: Sequence[VersionStrategy],
    default: VersionStrategy,
) -> VersionStrategy:
    """Return the first strategy whose selector accepts, else ``default``."""
    for strategy in strategies:
        if strategy.selector(context):
            logger.debug("Selected version strategy %s", strategy.name)
            return strategy

    logger.debug("No strategy selected; falling back to %s", default.name)
    return default


def resolve(
    context: ReleaseContext,
    strategies: Sequence[VersionStrategy] | None = None,
    default: VersionStrategy = stage_strategies.DEVELOPMENT,
) -> Resolution:
    """Infer the release version.

    Args:
        context: Repository state and release request
        strategies: Candidates in precedence order (defaults to
            :func:`default_strategies`)
        default: Strategy used when no candidate selects

    Returns:
        The winning strategy and its inferred version
    """
    if strategies is None:
        strategies = default_strategies()

    strategy = select_strategy(context, strategies, default)
    version = strategy.infer(context)
    logger.info("Inferred version %s using %s", version.version, strategy.name)
    return Resolution(strategy=strategy, version=version)
