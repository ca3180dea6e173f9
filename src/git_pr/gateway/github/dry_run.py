"""No-op GitHub wrapper for dry-run mode."""

import shlex
from pathlib import Path

from git_pr.gateway.github.abc import GitHub
from git_pr.gateway.github.real import build_create_pr_command, build_update_pr_body_command
from git_pr.gateway.github.types import RemotePullRequest
from git_pr.output import user_output


class DryRunGitHub(GitHub):
    """No-op wrapper that prevents execution of mutating GitHub operations.

    Mutations print the exact gh command that would run; queries pass through
    to the wrapped implementation so the rest of the flow behaves as in a real run.

    Usage:
        github = DryRunGitHub(RealGitHub())

        # Prints "[DRY RUN] Would run: gh pr create ..." instead of creating a PR
        github.create_pr(repo_root, base="main", title="...", body="...", reviewers=[])
    """

    def __init__(self, wrapped: GitHub) -> None:
        """Create a dry-run wrapper around a GitHub implementation.

        Args:
            wrapped: The GitHub implementation to wrap (usually RealGitHub)
        """
        self._wrapped = wrapped

    def get_authenticated_user(self, repo_root: Path) -> str:
        return self._wrapped.get_authenticated_user(repo_root)

    def list_assignable_users(self, repo_root: Path) -> list[str]:
        return self._wrapped.list_assignable_users(repo_root)

    def list_my_open_prs(self, repo_root: Path, user: str) -> list[RemotePullRequest]:
        return self._wrapped.list_my_open_prs(repo_root, user)

    def get_pr(self, repo_root: Path, pr_number: int) -> RemotePullRequest:
        return self._wrapped.get_pr(repo_root, pr_number)

    def create_pr(
        self,
        repo_root: Path,
        *,
        base: str,
        title: str,
        body: str,
        reviewers: list[str],
    ) -> str:
        """Print dry-run message instead of creating the PR."""
        cmd = build_create_pr_command(base=base, title=title, body=body, reviewers=reviewers)
        user_output(f"[DRY RUN] Would run: {shlex.join(cmd)}")
        return "Dry run - no PR created"

    def update_pr_body(self, repo_root: Path, pr_number: int, repo_ref: str, body: str) -> str:
        """Print dry-run message instead of editing the PR."""
        cmd = build_update_pr_body_command(pr_number, repo_ref, body)
        user_output(f"[DRY RUN] Would run: {shlex.join(cmd)}")
        return "Dry run - no PR updated"
