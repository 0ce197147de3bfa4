"""Core business logic for release-stager.

This module contains the fundamental building blocks:
- Semantic version values and the nearest-version locator
- Version strategies and the strategy chain
- Stage determination and release preconditions
- Tag and branch creation with generated release notes
"""

from __future__ import annotations

from release_stager.core.checks import check_activation, check_branch_name, check_clean_tree, check_stage
from release_stager.core.locator import NearestVersion, NearestVersionLocator
from release_stager.core.release import ReleaseOutcome, ReleasePipeline
from release_stager.core.resolver import Resolution, default_strategies, resolve
from release_stager.core.stage import Stage, StageDecision, determine_stage
from release_stager.core.state import ReleaseContext, RepositoryState
from release_stager.core.strategies import (
    NoCommitStrategy,
    PropertyStrategy,
    ReleaseLastTagStrategy,
    ReleaseVersion,
    VersionStrategy,
)
from release_stager.core.tagging import TagAndBranchStrategy, TagRequest, TagStrategy, generate_message
from release_stager.core.version import BumpType, Version

__all__ = [
    # Version
    "BumpType",
    # Strategies
    "NearestVersion",
    "NearestVersionLocator",
    "NoCommitStrategy",
    "PropertyStrategy",
    # Pipeline
    "ReleaseContext",
    "ReleaseLastTagStrategy",
    "ReleaseOutcome",
    "ReleasePipeline",
    "ReleaseVersion",
    "RepositoryState",
    "Resolution",
    # Stages
    "Stage",
    "StageDecision",
    # Tagging
    "TagAndBranchStrategy",
    "TagRequest",
    "TagStrategy",
    "Version",
    "VersionStrategy",
    "check_activation",
    "check_branch_name",
    "check_clean_tree",
    "check_stage",
    "default_strategies",
    "determine_stage",
    "generate_message",
    "resolve",
]
