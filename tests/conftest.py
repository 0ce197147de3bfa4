"""Shared fixtures for release-stager tests."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from release_stager.core.state import ReleaseContext, RepositoryState
from release_stager.vcs.git import GitRepository, WorkingTreeStatus

if TYPE_CHECKING:
    from pathlib import Path


def git(cwd: Path, *args: str) -> str:
    """Run a git command in ``cwd`` and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo_path: Path, message: str, filename: str = "file.txt") -> str:
    """Append to a file, commit it and return the new commit sha."""
    target = repo_path / filename
    previous = target.read_text() if target.exists() else ""
    target.write_text(previous + message + "\n")
    git(repo_path, "add", filename)
    git(repo_path, "commit", "-m", message)
    return git(repo_path, "rev-parse", "HEAD")


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user and system git configuration out of the tests."""
    home = tmp_path_factory.mktemp("home")
    gitconfig = home / ".gitconfig"
    gitconfig.write_text("")

    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """A git repository on branch master without any commits."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    git(repo_path, "init", "--quiet")
    git(repo_path, "symbolic-ref", "HEAD", "refs/heads/master")
    return repo_path


@pytest.fixture
def temp_git_repo(empty_git_repo: Path) -> Path:
    """A git repository with a single commit on master."""
    commit_file(empty_git_repo, "chore: initial commit")
    return empty_git_repo


@pytest.fixture
def temp_git_repo_with_remote(temp_git_repo: Path, tmp_path: Path) -> Path:
    """A git repository whose master branch is pushed to a bare ``origin``."""
    remote_path = tmp_path / "origin.git"
    git(tmp_path, "init", "--quiet", "--bare", str(remote_path))
    git(temp_git_repo, "remote", "add", "origin", str(remote_path))
    git(temp_git_repo, "push", "--quiet", "-u", "origin", "master")
    return temp_git_repo


@pytest.fixture
def released_git_repo(temp_git_repo_with_remote: Path) -> Path:
    """A repository tagged v1.0.0 followed by three more commits."""
    repo_path = temp_git_repo_with_remote
    git(repo_path, "tag", "-a", "v1.0.0", "-m", "Release of 1.0.0")
    for message in ("docs", "feat", "fix"):
        commit_file(repo_path, message)
    return repo_path


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """Create a mock GitRepository."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    return repo


@pytest.fixture
def repo_state(mock_repo: MagicMock) -> RepositoryState:
    """A clean repository state on master backed by ``mock_repo``."""
    return RepositoryState(
        repo=mock_repo,
        current_branch_name="master",
        has_commits=True,
        status=WorkingTreeStatus(),
    )


@pytest.fixture
def context(repo_state: RepositoryState) -> ReleaseContext:
    """A release context with no stage and no properties."""
    return ReleaseContext(state=repo_state)
