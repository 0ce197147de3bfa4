"""Git repository facade.

All interaction with git goes through :class:`GitRepository`, which
shells out to the ``git`` executable. Every call is blocking and is
never retried: a failing command raises :class:`GitError` and the
caller aborts.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from release_stager.exceptions import GitError, RepositoryNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

SHORT_SHA_LENGTH = 7

# Separates fields and records in `git log` output
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


@dataclass(frozen=True)
class Commit:
    """A single commit as returned by :meth:`GitRepository.log`."""

    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def short_message(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Staged and unstaged changes in the working tree.

    Untracked files are reported as unstaged changes.
    """

    staged: tuple[str, ...] = ()
    unstaged: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.staged and not self.unstaged

    @classmethod
    def from_porcelain(cls, output: str) -> WorkingTreeStatus:
        """Parse ``git status --porcelain=v1 -z`` output."""
        staged: list[str] = []
        unstaged: list[str] = []

        entries = iter(output.split("\0"))
        for entry in entries:
            if len(entry) < 4:
                continue
            index, worktree, path = entry[0], entry[1], entry[3:]
            if index in "RC":
                # Renames and copies carry the source path as an extra entry
                next(entries, None)
            if index == "?" and worktree == "?":
                unstaged.append(path)
                continue
            if index not in " ?!":
                staged.append(path)
            if worktree not in " ?!":
                unstaged.append(path)

        return cls(staged=tuple(staged), unstaged=tuple(unstaged))


class GitRepository:
    """Facade over a local git repository.

    Args:
        path: Any directory inside the repository

    Raises:
        RepositoryNotFoundError: If ``path`` is not inside a git work tree
    """

    def __init__(self, path: Path | str) -> None:
        start = Path(path).resolve()
        if not start.is_dir():
            raise RepositoryNotFoundError(f"Not a directory: {start}")

        try:
            root = self._git(start, "rev-parse", "--show-toplevel")
        except GitError as e:
            raise RepositoryNotFoundError(f"Git repository not found at {start}") from e

        self.path = Path(root)

    def __repr__(self) -> str:
        return f"GitRepository({str(self.path)!r})"

    @staticmethod
    def _git(cwd: Path, *args: str) -> str:
        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout.strip()

    def _run(self, *args: str) -> str:
        return self._git(self.path, *args)

    # Queries

    def current_branch_name(self) -> str:
        """Name of the checked-out branch, or ``HEAD`` when detached."""
        try:
            return self._run("symbolic-ref", "--quiet", "--short", "HEAD")
        except GitError:
            return "HEAD"

    def has_commits(self) -> bool:
        return self.resolve_to_commit("HEAD") is not None

    def status(self) -> WorkingTreeStatus:
        # strip() in _run would eat a leading space of the first entry
        result = subprocess.run(
            ["git", "status", "--porcelain=v1", "-z", "--untracked-files=all"],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            raise GitError("git status failed", stderr=result.stderr)
        return WorkingTreeStatus.from_porcelain(result.stdout)

    def resolve_to_commit(self, revision: str) -> Commit | None:
        """Resolve a revision string to a commit.

        Returns:
            The commit, or None if the revision does not resolve
        """
        rev = revision if revision.endswith("^{commit}") else f"{revision}^{{commit}}"
        try:
            sha = self._run("rev-parse", "--verify", "--quiet", rev)
            message = self._run("log", "-1", "--format=%B", sha)
        except GitError:
            return None
        return Commit(sha=sha, message=message)

    def tag_exists(self, revision: str) -> bool:
        return self.resolve_to_commit(revision) is not None

    def head_commit(self) -> Commit:
        """Return the commit at HEAD.

        Raises:
            GitError: If the repository has no commits
        """
        commit = self.resolve_to_commit("HEAD")
        if commit is None:
            raise GitError("HEAD does not point to a commit")
        return commit

    def log(
        self,
        includes: Sequence[str] = ("HEAD",),
        excludes: Sequence[str] = (),
    ) -> list[Commit]:
        """List commits reachable from ``includes`` but not from ``excludes``.

        Returns:
            Commits, newest first
        """
        args = ["log", f"--format=%H{_FIELD_SEP}%B{_RECORD_SEP}", *includes]
        args.extend(f"^{ref}" for ref in excludes)
        output = self._run(*args, "--")

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip()
            if not record:
                continue
            sha, _, message = record.partition(_FIELD_SEP)
            commits.append(Commit(sha=sha.strip(), message=message.strip()))
        return commits

    def count_commits(
        self,
        includes: Sequence[str] = ("HEAD",),
        excludes: Sequence[str] = (),
    ) -> int:
        args = ["rev-list", "--count", *includes]
        args.extend(f"^{ref}" for ref in excludes)
        return int(self._run(*args, "--"))

    def tags_merged_into(self, revision: str = "HEAD") -> list[str]:
        """Names of tags whose commits are reachable from ``revision``."""
        output = self._run("tag", "--merged", revision)
        return [line.strip() for line in output.splitlines() if line.strip()]

    # Mutations

    def create_tag(self, name: str, message: str, revision: str = "HEAD") -> None:
        """Create an annotated tag."""
        logger.info("Creating tag %s", name)
        self._run("tag", "--annotate", name, "--message", message, revision)

    def branch_add(self, name: str, start_point: str, *, track: bool = True) -> None:
        """Create a branch at ``start_point``, optionally tracking it."""
        logger.info("Creating branch %s from %s", name, start_point)
        mode = "--track" if track else "--no-track"
        self._run("branch", mode, name, start_point)

    def push(self, *refspecs: str, remote: str = "origin", all_branches: bool = False) -> None:
        """Push to ``remote``.

        Args:
            refspecs: Refs to push
            remote: Remote name
            all_branches: Push every local branch instead of ``refspecs``
        """
        if all_branches:
            logger.info("Pushing all branches to %s", remote)
            self._run("push", "--all", remote)
            return
        logger.info("Pushing %s to %s", ", ".join(refspecs), remote)
        self._run("push", remote, *refspecs)
