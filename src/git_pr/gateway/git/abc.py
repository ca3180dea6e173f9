"""Read-only git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
lineage resolver testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests

git-pr never writes to the repository, so there is no dry-run variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommitRecord:
    """A single commit in the repository's history graph.

    Attributes:
        sha: Full commit hash
        message: Full commit message (subject and body)
        parents: Parent hashes, first parent first. Empty for root commits.
    """

    sha: str
    message: str
    parents: tuple[str, ...]


class Git(ABC):
    """Abstract interface for the git queries git-pr needs.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd.

        Returns:
            Repository root, or None if cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def has_operation_in_progress(self, repo_root: Path) -> bool:
        """Check whether a merge, rebase, cherry-pick, revert or bisect is in progress."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Returns:
            Branch name, or None if in detached HEAD state
        """
        ...

    @abstractmethod
    def list_local_branches(self, repo_root: Path) -> list[str]:
        """List all local branch names in the repository."""
        ...

    @abstractmethod
    def list_remote_branches(self, repo_root: Path) -> list[str]:
        """List remote-tracking branch names.

        Returns names with their remote prefix (e.g. 'origin/main'). Symbolic
        remote heads such as 'origin/HEAD' are not included.
        """
        ...

    @abstractmethod
    def read_commits(self, repo_root: Path, heads: list[str]) -> dict[str, CommitRecord]:
        """Read every commit reachable from any of the given commits.

        Args:
            repo_root: Path to the repository root
            heads: Commit shas to start from, as returned by get_branch_head()

        Returns:
            Mapping of commit sha -> CommitRecord
        """
        ...

    @abstractmethod
    def get_branch_head(self, repo_root: Path, branch: str, *, remote: bool = False) -> str | None:
        """Get the commit sha a branch points at, or None if it does not exist.

        Args:
            repo_root: Path to the repository root
            branch: Local branch name, or remote-tracking name such as 'origin/main'
            remote: Look the name up among remote-tracking branches
        """
        ...
