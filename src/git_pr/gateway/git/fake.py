"""Fake git queries for testing."""

from __future__ import annotations

from pathlib import Path

from git_pr.gateway.git.abc import CommitRecord, Git


class FakeGit(Git):
    """In-memory fake implementation of the git queries.

    The fake holds a commit arena plus branch -> sha mappings and answers every
    query from them. Unknown commits raise RuntimeError, matching the way
    run_subprocess_with_context reports a failing git command.

    Query Tracking:
    --------------
    - read_commits_calls: head shas passed to each read_commits() call
    """

    def __init__(
        self,
        *,
        repo_root: Path | None = Path("/repo"),
        commits: list[CommitRecord] | None = None,
        local_branches: dict[str, str] | None = None,
        remote_branches: dict[str, str] | None = None,
        current_branch: str | None = None,
        operation_in_progress: bool = False,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repo_root: Root returned for any cwd, or None to simulate "not a repository"
            commits: Commit records forming the history graph
            local_branches: Mapping of local branch name -> head sha
            remote_branches: Mapping of remote-tracking name (e.g. 'origin/main') -> head sha
            current_branch: Checked-out branch, or None for detached HEAD
            operation_in_progress: Simulate an unfinished merge/rebase
        """
        self._repo_root = repo_root
        self._commits = {c.sha: c for c in commits} if commits is not None else {}
        self._local_branches = local_branches if local_branches is not None else {}
        self._remote_branches = remote_branches if remote_branches is not None else {}
        self._current_branch = current_branch
        self._operation_in_progress = operation_in_progress
        self._read_commits_calls: list[list[str]] = []

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repo_root

    def has_operation_in_progress(self, repo_root: Path) -> bool:
        return self._operation_in_progress

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def list_local_branches(self, repo_root: Path) -> list[str]:
        return list(self._local_branches)

    def list_remote_branches(self, repo_root: Path) -> list[str]:
        return list(self._remote_branches)

    def read_commits(self, repo_root: Path, heads: list[str]) -> dict[str, CommitRecord]:
        self._read_commits_calls.append(list(heads))
        result: dict[str, CommitRecord] = {}
        stack = list(heads)
        while stack:
            sha = stack.pop()
            if sha in result:
                continue
            commit = self._commits.get(sha)
            if commit is None:
                raise RuntimeError(f"Failed to read history: missing object {sha}")
            result[sha] = commit
            stack.extend(commit.parents)
        return result

    def get_branch_head(self, repo_root: Path, branch: str, *, remote: bool = False) -> str | None:
        branches = self._remote_branches if remote else self._local_branches
        return branches.get(branch)

    @property
    def read_commits_calls(self) -> list[list[str]]:
        """Head shas passed to read_commits(), one list per call.

        This property is for test assertions only.
        """
        return [list(heads) for heads in self._read_commits_calls]
