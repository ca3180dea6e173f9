"""Production implementation of git queries using subprocess."""

import logging
import subprocess
from pathlib import Path
from typing import Any

from git_pr.core.errors import RepositoryAccessError
from git_pr.gateway.git.abc import CommitRecord, Git
from git_pr.subprocess_utils import copied_env_for_git_subprocess, run_subprocess_with_context

logger = logging.getLogger(__name__)

# Files/directories git leaves in the git dir while an operation is unfinished
_IN_PROGRESS_MARKERS = (
    "MERGE_HEAD",
    "CHERRY_PICK_HEAD",
    "REVERT_HEAD",
    "BISECT_LOG",
    "rebase-merge",
    "rebase-apply",
)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x00"

_LOCAL_PREFIX = "refs/heads/"
_REMOTE_PREFIX = "refs/remotes/"


def parse_log_output(stdout: str) -> dict[str, CommitRecord]:
    """Parse `git log -z --format=%H%x1f%P%x1f%B` output into commit records."""
    commits: dict[str, CommitRecord] = {}
    for record in stdout.split(_RECORD_SEP):
        record = record.lstrip("\n")
        if not record:
            continue
        sha, parents, message = record.split(_FIELD_SEP, 2)
        commits[sha] = CommitRecord(
            sha=sha,
            message=message,
            parents=tuple(parents.split()),
        )
    return commits


class RealGit(Git):
    """Production implementation of read-only git queries.

    All operations execute actual git commands via subprocess. Branches are
    always addressed by their full ref (refs/heads/..., refs/remotes/...) so a
    tag with the same name as a branch never shadows it.
    """

    def _run_quiet(self, cmd: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise RepositoryAccessError("run git", "git is not installed or not on PATH") from e

    def _run(self, cmd: list[str], repo_root: Path, *, operation: str, **kwargs: Any) -> str:
        try:
            result = run_subprocess_with_context(
                cmd, operation_context=operation, cwd=repo_root, **kwargs
            )
        except FileNotFoundError as e:
            raise RepositoryAccessError(operation, "git is not installed or not on PATH") from e
        return result.stdout

    def get_repository_root(self, cwd: Path) -> Path | None:
        result = self._run_quiet(["git", "rev-parse", "--show-toplevel"], cwd)
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def has_operation_in_progress(self, repo_root: Path) -> bool:
        stdout = self._run(
            ["git", "rev-parse", "--absolute-git-dir"],
            repo_root,
            operation="locate git directory",
        )
        git_dir = Path(stdout.strip())
        in_progress = [marker for marker in _IN_PROGRESS_MARKERS if (git_dir / marker).exists()]
        if in_progress:
            logger.debug("Operation in progress in %s: %s", git_dir, ", ".join(in_progress))
        return bool(in_progress)

    def get_current_branch(self, cwd: Path) -> str | None:
        # --short would print heads/<name> when a tag shares the name
        result = self._run_quiet(["git", "symbolic-ref", "-q", "HEAD"], cwd)
        if result.returncode != 0:
            return None

        ref = result.stdout.strip()
        if not ref.startswith(_LOCAL_PREFIX):
            return None

        return ref.removeprefix(_LOCAL_PREFIX)

    def _list_refs(self, repo_root: Path, prefix: str, *, operation: str) -> list[str]:
        stdout = self._run(
            ["git", "for-each-ref", "--format=%(refname)%00%(symref)", prefix],
            repo_root,
            operation=operation,
        )
        names: list[str] = []
        for line in stdout.strip().split("\n"):
            if not line.strip():
                continue
            refname, _, symref = line.partition("\0")
            # origin/HEAD and friends point at another branch
            if symref:
                continue
            names.append(refname.removeprefix(prefix))
        return names

    def list_local_branches(self, repo_root: Path) -> list[str]:
        return self._list_refs(repo_root, _LOCAL_PREFIX, operation="list local branches")

    def list_remote_branches(self, repo_root: Path) -> list[str]:
        return self._list_refs(repo_root, _REMOTE_PREFIX, operation="list remote branches")

    def read_commits(self, repo_root: Path, heads: list[str]) -> dict[str, CommitRecord]:
        if not heads:
            return {}
        stdout = self._run(
            ["git", "log", "-z", "--format=%H%x1f%P%x1f%B", *heads, "--"],
            repo_root,
            operation=f"read history of {len(heads)} commit(s)",
            env=copied_env_for_git_subprocess(),
        )
        commits = parse_log_output(stdout)
        logger.debug("Read %d commits reachable from %d heads", len(commits), len(heads))
        return commits

    def get_branch_head(self, repo_root: Path, branch: str, *, remote: bool = False) -> str | None:
        ref = f"{_REMOTE_PREFIX if remote else _LOCAL_PREFIX}{branch}"
        result = self._run_quiet(
            ["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], repo_root
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()
