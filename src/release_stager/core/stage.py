"""Release stage determination.

A release is requested by naming at most one stage, mirroring the
build tasks ``snapshot``, ``devSnapshot``, ``candidate`` and ``final``.
The resulting :class:`StageDecision` is computed once and handed to
every later step of the pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from release_stager.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

STAGE_CONFLICT_MESSAGE = "Only one of snapshot, devSnapshot, candidate, or final can be specified."


class Stage(StrEnum):
    """A requestable release stage, valued by its task name."""

    SNAPSHOT = "snapshot"
    DEV_SNAPSHOT = "devSnapshot"
    CANDIDATE = "candidate"
    FINAL = "final"

    @property
    def strategy_name(self) -> str:
        """Name of the version strategy that serves this stage."""
        return _STRATEGY_NAMES[self]

    @property
    def marker(self) -> str:
        """Value of the build-wide ``release.stage`` marker."""
        return _MARKERS[self]

    @property
    def status(self) -> str | None:
        """Publication status, for stages that publish one."""
        return _STATUSES.get(self)

    @property
    def is_snapshot(self) -> bool:
        return self in (Stage.SNAPSHOT, Stage.DEV_SNAPSHOT)


_STRATEGY_NAMES = {
    Stage.SNAPSHOT: "SNAPSHOT",
    Stage.DEV_SNAPSHOT: "DEVELOPMENT",
    Stage.CANDIDATE: "PRE_RELEASE",
    Stage.FINAL: "FINAL",
}

_MARKERS = {
    Stage.SNAPSHOT: "SNAPSHOT",
    Stage.DEV_SNAPSHOT: "dev",
    Stage.CANDIDATE: "rc",
    Stage.FINAL: "final",
}

_STATUSES = {
    Stage.CANDIDATE: "candidate",
    Stage.FINAL: "release",
}

_ALIASES = {
    "dev-snapshot": Stage.DEV_SNAPSHOT,
    "dev_snapshot": Stage.DEV_SNAPSHOT,
    "devsnapshot": Stage.DEV_SNAPSHOT,
}


def parse_stage(name: str) -> Stage | None:
    """Map a requested task name to a stage, or None if it is not one."""
    try:
        return Stage(name)
    except ValueError:
        return _ALIASES.get(name.lower())


@dataclass(frozen=True)
class StageDecision:
    """The stage chosen for this invocation.

    Attributes:
        stage: Requested stage, or None when no stage was named
        is_snapshot_release: Whether the release is exempt from the
            clean-tree requirement and permanent tagging
    """

    stage: Stage | None
    is_snapshot_release: bool

    @property
    def marker(self) -> str | None:
        return self.stage.marker if self.stage else None

    @property
    def status(self) -> str | None:
        return self.stage.status if self.stage else None

    @property
    def strategy_name(self) -> str | None:
        return self.stage.strategy_name if self.stage else None


def determine_stage(requested: Iterable[str]) -> StageDecision:
    """Choose the release stage from the requested task names.

    Names that are not stages are ignored. Snapshot is the default when
    neither candidate nor final is requested.

    Raises:
        ConfigurationError: If more than one stage is requested
    """
    stages = {stage for name in requested if (stage := parse_stage(name)) is not None}

    if len(stages) > 1:
        raise ConfigurationError(STAGE_CONFLICT_MESSAGE)

    has_candidate = Stage.CANDIDATE in stages
    has_final = Stage.FINAL in stages
    is_snapshot_release = (
        Stage.SNAPSHOT in stages
        or Stage.DEV_SNAPSHOT in stages
        or (not has_candidate and not has_final)
    )

    stage = next(iter(stages), None)
    if stage is not None:
        logger.info("Release stage: %s (status %s)", stage.marker, stage.status or "integration")

    return StageDecision(stage=stage, is_snapshot_release=is_snapshot_release)
