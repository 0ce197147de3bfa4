"""Tests for version strategies, the strategy chain and the locator."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from release_stager.config.models import ReleaseProperties, ReleaseStagerConfig
from release_stager.core import stage_strategies
from release_stager.core.locator import NearestVersion, NearestVersionLocator
from release_stager.core.resolver import default_strategies, resolve, select_strategy
from release_stager.core.stage import determine_stage
from release_stager.core.strategies import (
    UNCOMMITTED_VERSION,
    NoCommitStrategy,
    PropertyStrategy,
    ReleaseLastTagStrategy,
    ReleaseVersion,
)
from release_stager.core.version import Version
from release_stager.exceptions import ConfigurationError
from release_stager.vcs.git import Commit, WorkingTreeStatus


def with_properties(context, **properties):
    return replace(context, properties=ReleaseProperties.model_validate(properties))


def configure_tags(repo: MagicMock, distances: dict[str, int], total: int = 10) -> None:
    """Make ``repo`` report ``distances`` as the tags reachable from HEAD."""
    repo.tags_merged_into.return_value = list(distances)

    def count_commits(includes=("HEAD",), excludes=()):
        if not excludes:
            return total
        return distances[excludes[0].removesuffix("^{commit}")]

    repo.count_commits.side_effect = count_commits
    repo.head_commit.return_value = Commit(sha="abcdef1234567890", message="feat: thing")


class TestReleaseVersion:
    """Tests for ReleaseVersion."""

    def test_defaults(self):
        version = ReleaseVersion("1.0.0")

        assert version.previous_version is None
        assert version.create_tag is False

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_version_rejected(self, value):
        with pytest.raises(ValueError):
            ReleaseVersion(value)


class TestNoCommitStrategy:
    """Tests for NoCommitStrategy."""

    def test_selects_without_commits(self, context):
        empty = replace(context, state=replace(context.state, has_commits=False))

        assert NoCommitStrategy().selector(empty)
        assert not NoCommitStrategy().selector(context)

    def test_infers_placeholder(self, context):
        version = NoCommitStrategy().infer(context)

        assert version == ReleaseVersion("0.1.0-dev.0.uncommitted", None, False)

    def test_wins_regardless_of_properties(self, context):
        """An empty repository ignores every other request."""
        empty = replace(context, state=replace(context.state, has_commits=False))
        empty = with_properties(empty, **{"release.version": "1.2.3", "release.useLastTag": "true"})
        empty = replace(empty, stage=determine_stage(["final"]))

        resolution = resolve(empty)

        assert resolution.version.version == UNCOMMITTED_VERSION
        assert resolution.version.create_tag is False


class TestReleaseLastTagStrategy:
    """Tests for ReleaseLastTagStrategy."""

    def test_selects_on_truthy_property(self, context):
        strategy = ReleaseLastTagStrategy()

        assert strategy.selector(with_properties(context, **{"release.useLastTag": "true"}))
        assert not strategy.selector(with_properties(context, **{"release.useLastTag": "false"}))
        assert not strategy.selector(context)

    def test_custom_property_name(self, context):
        strategy = ReleaseLastTagStrategy("reuse")

        assert strategy.selector(with_properties(context, reuse="true"))

    def test_infers_nearest_tag(self, context, mock_repo):
        configure_tags(mock_repo, {"v2.0.0": 0, "v1.0.0": 5})

        version = ReleaseLastTagStrategy().infer(context)

        assert version == ReleaseVersion("2.0.0", None, False)

    def test_suppresses_release(self, context, mock_repo):
        """Selecting the last tag disables tagging downstream."""
        configure_tags(mock_repo, {"v2.0.0": 0})

        resolution = resolve(with_properties(context, **{"release.useLastTag": "true"}))

        assert resolution.strategy_name == "use-last-tag"
        assert resolution.tagging_enabled is False


class TestPropertyStrategy:
    """Tests for PropertyStrategy."""

    def test_selects_when_present(self, context):
        assert PropertyStrategy().selector(with_properties(context, **{"release.version": "1.2.3"}))
        assert not PropertyStrategy().selector(context)

    def test_infers_literal(self, context):
        version = PropertyStrategy().infer(with_properties(context, **{"release.version": "1.2.3"}))

        assert version == ReleaseVersion("1.2.3", None, True)

    def test_custom_property_name(self, context):
        strategy = PropertyStrategy("release.override")
        ctx = with_properties(context, **{"release.override": "42.5.0"})

        assert strategy.selector(ctx)
        assert strategy.infer(ctx).version == "42.5.0"

    @pytest.mark.parametrize("value", ["", "  "])
    def test_empty_value_raises(self, context, value):
        ctx = with_properties(context, **{"release.version": value})

        with pytest.raises(ConfigurationError, match="Supplied release.version is empty"):
            PropertyStrategy().infer(ctx)

    def test_invalid_value_raises(self, context):
        ctx = with_properties(context, **{"release.version": "banana"})

        with pytest.raises(ConfigurationError, match="not a valid version"):
            PropertyStrategy().infer(ctx)

    def test_beats_semver_inference(self, context, mock_repo):
        """An explicit version wins even when tags suggest another."""
        configure_tags(mock_repo, {"v1.0.0": 3})
        ctx = with_properties(context, **{"release.version": "1.2.3"})
        ctx = replace(ctx, stage=determine_stage(["final"]))

        resolution = resolve(ctx)

        assert resolution.version == ReleaseVersion("1.2.3", None, True)
        assert resolution.tagging_enabled is True


class TestStageStrategies:
    """Tests for the per-stage SemVer strategies."""

    def staged(self, context, stage, **properties):
        return with_properties(replace(context, stage=determine_stage([stage])), **properties)

    def test_final_bumps_minor(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})

        version = stage_strategies.FINAL.infer(self.staged(context, "final"))

        assert version == ReleaseVersion("1.1.0", "1.0.0", True)

    @pytest.mark.parametrize(("scope", "expected"), [("major", "2.0.0"), ("patch", "1.0.1")])
    def test_final_scope(self, context, mock_repo, scope, expected):
        configure_tags(mock_repo, {"v1.0.0": 3})

        version = stage_strategies.FINAL.infer(self.staged(context, "final", **{"release.scope": scope}))

        assert version.version == expected

    def test_default_scope_from_config(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})
        ctx = replace(self.staged(context, "final"), config=ReleaseStagerConfig(default_scope="patch"))

        assert stage_strategies.FINAL.infer(ctx).version == "1.0.1"

    def test_invalid_scope_raises(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})

        with pytest.raises(ConfigurationError, match="Unknown scope"):
            stage_strategies.FINAL.infer(self.staged(context, "final", **{"release.scope": "huge"}))

    def test_final_after_candidate(self, context, mock_repo):
        """A tagged candidate fixes the target of the final release."""
        configure_tags(mock_repo, {"v1.1.0-rc.2": 1, "v1.0.0": 4})

        assert stage_strategies.FINAL.infer(self.staged(context, "final")).version == "1.1.0"

    def test_first_candidate(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})

        version = stage_strategies.PRE_RELEASE.infer(self.staged(context, "candidate"))

        assert version == ReleaseVersion("1.1.0-rc.1", "1.0.0", True)

    def test_next_candidate(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.1.0-rc.1": 1, "v1.0.0": 4})

        assert stage_strategies.PRE_RELEASE.infer(self.staged(context, "candidate")).version == "1.1.0-rc.2"

    def test_snapshot(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})

        version = stage_strategies.SNAPSHOT.infer(self.staged(context, "snapshot"))

        assert version == ReleaseVersion("1.1.0-SNAPSHOT", "1.0.0", False)

    def test_development(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})

        version = stage_strategies.DEVELOPMENT.infer(self.staged(context, "devSnapshot"))

        assert version == ReleaseVersion("1.1.0-dev.3+abcdef1", "1.0.0", False)

    def test_development_dirty(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 3})
        ctx = self.staged(context, "devSnapshot")
        ctx = replace(ctx, state=replace(ctx.state, status=WorkingTreeStatus(unstaged=("a.py",))))

        assert stage_strategies.DEVELOPMENT.infer(ctx).version == "1.1.0-dev.3.uncommitted+abcdef1"

    def test_no_tags(self, context, mock_repo):
        """Without tags the first release is 0.1.0 with no previous version."""
        configure_tags(mock_repo, {}, total=7)

        final = stage_strategies.FINAL.infer(self.staged(context, "final"))
        dev = stage_strategies.DEVELOPMENT.infer(self.staged(context, "devSnapshot"))

        assert final == ReleaseVersion("0.1.0", None, True)
        assert dev.version == "0.1.0-dev.7+abcdef1"

    @pytest.mark.parametrize(
        ("stage", "strategy"),
        [
            ("snapshot", stage_strategies.SNAPSHOT),
            ("devSnapshot", stage_strategies.DEVELOPMENT),
            ("candidate", stage_strategies.PRE_RELEASE),
            ("final", stage_strategies.FINAL),
        ],
    )
    def test_selects_own_stage(self, context, stage, strategy):
        ctx = self.staged(context, stage)

        assert select_strategy(ctx, default_strategies(), stage_strategies.DEVELOPMENT) is strategy


class TestResolve:
    """Tests for resolve() and the default chain."""

    def test_registration_order(self):
        names = [strategy.name for strategy in default_strategies()]

        assert names == [
            "no-commit",
            "use-last-tag",
            "version-property",
            "SNAPSHOT",
            "DEVELOPMENT",
            "PRE_RELEASE",
            "FINAL",
        ]

    def test_falls_back_to_default(self, context, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 2})

        resolution = resolve(context)

        assert resolution.strategy is stage_strategies.DEVELOPMENT
        assert resolution.version.version == "1.1.0-dev.2+abcdef1"

    def test_first_selecting_strategy_wins(self, context):
        first = MagicMock(name="first")
        first.selector.return_value = True
        first.infer.return_value = ReleaseVersion("1.0.0")
        second = MagicMock(name="second")
        second.selector.return_value = True

        resolution = resolve(context, [first, second], default=second)

        assert resolution.strategy is first
        second.selector.assert_not_called()
        second.infer.assert_not_called()

    def test_default_used_when_none_select(self, context):
        never = MagicMock()
        never.selector.return_value = False
        default = MagicMock()
        default.infer.return_value = ReleaseVersion("9.9.9")

        resolution = resolve(context, [never], default=default)

        assert resolution.version.version == "9.9.9"
        default.selector.assert_not_called()


class TestNearestVersionLocator:
    """Tests for NearestVersionLocator."""

    def test_nearest_by_distance(self, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 5, "v1.1.0": 2, "other-tag": 0})

        nearest = NearestVersionLocator().locate(mock_repo)

        assert nearest.any == Version(1, 1, 0)
        assert nearest.normal == Version(1, 1, 0)
        assert nearest.distance_from_any == 2

    def test_ties_prefer_higher_version(self, mock_repo):
        configure_tags(mock_repo, {"v1.0.0": 0, "v1.0.1": 0})

        assert NearestVersionLocator().locate(mock_repo).any == Version(1, 0, 1)

    def test_prerelease_only_counts_as_any(self, mock_repo):
        configure_tags(mock_repo, {"v2.0.0-rc.1": 1, "v1.0.0": 3})

        nearest = NearestVersionLocator().locate(mock_repo)

        assert nearest.any == Version.parse("2.0.0-rc.1")
        assert nearest.normal == Version(1, 0, 0)
        assert nearest.distance_from_normal == 3

    def test_no_tags(self, mock_repo):
        configure_tags(mock_repo, {}, total=4)

        nearest = NearestVersionLocator().locate(mock_repo)

        assert nearest == NearestVersion(Version(0, 0, 0), Version(0, 0, 0), 4, 4, found=False)
        assert not nearest.normal_found

    def test_custom_prefix(self, mock_repo):
        configure_tags(mock_repo, {"release-3.0.0": 1, "v9.0.0": 0})

        assert NearestVersionLocator("release-").locate(mock_repo).any == Version(3, 0, 0)
