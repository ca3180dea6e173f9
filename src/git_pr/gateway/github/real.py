"""Production implementation of GitHub operations using the gh CLI."""

import logging
from pathlib import Path

from git_pr.core.errors import GitHubCliError
from git_pr.gateway.github.abc import GitHub
from git_pr.gateway.github.graphql_queries import ASSIGNABLE_USERS_QUERY, USER_OPEN_PRS_QUERY
from git_pr.gateway.github.parsing import (
    parse_assignable_users,
    parse_pr_view,
    parse_user_open_prs,
)
from git_pr.gateway.github.types import RemotePullRequest
from git_pr.subprocess_utils import execute_gh_command

logger = logging.getLogger(__name__)


def build_create_pr_command(*, base: str, title: str, body: str, reviewers: list[str]) -> list[str]:
    """Build the `gh pr create` command for the current branch."""
    cmd = ["gh", "pr", "create", "-B", base, "-t", title, "-a", "@me", "-b", body]
    if reviewers:
        cmd.extend(["-r", ",".join(reviewers)])
    return cmd


def build_update_pr_body_command(pr_number: int, repo_ref: str, body: str) -> list[str]:
    """Build the `gh pr edit` command that replaces a PR body."""
    return ["gh", "pr", "edit", str(pr_number), "--repo", repo_ref, "-b", body]


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess. Launch
    failures, non-zero exits and unparseable output are wrapped in
    GitHubCliError naming the operation.
    """

    def _run(self, cmd: list[str], repo_root: Path, *, operation: str) -> str:
        try:
            return execute_gh_command(cmd, repo_root, operation_context=operation)
        except FileNotFoundError as e:
            raise GitHubCliError(operation, "gh is not installed or not on PATH") from e
        except RuntimeError as e:
            raise GitHubCliError(operation, str(e)) from e

    def get_authenticated_user(self, repo_root: Path) -> str:
        operation = "get authenticated user"
        stdout = self._run(["gh", "api", "user", "--jq", ".login"], repo_root, operation=operation)
        login = stdout.strip()
        if not login:
            raise GitHubCliError(operation, "no authenticated user found, run 'gh auth login'")
        return login

    def list_assignable_users(self, repo_root: Path) -> list[str]:
        operation = "list assignable users"
        cmd = [
            "gh",
            "api",
            "graphql",
            "-F",
            "owner=:owner",
            "-F",
            "repo=:repo",
            "-f",
            f"query={ASSIGNABLE_USERS_QUERY}",
        ]
        stdout = self._run(cmd, repo_root, operation=operation)
        try:
            return parse_assignable_users(stdout)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            raise GitHubCliError(operation, f"malformed response: {e}") from e

    def list_my_open_prs(self, repo_root: Path, user: str) -> list[RemotePullRequest]:
        operation = f"list open pull requests of '{user}'"
        cmd = [
            "gh",
            "api",
            "graphql",
            "-F",
            f"login={user}",
            "-f",
            f"query={USER_OPEN_PRS_QUERY}",
        ]
        stdout = self._run(cmd, repo_root, operation=operation)
        try:
            prs = parse_user_open_prs(stdout)
        except ValueError as e:
            raise GitHubCliError(operation, f"malformed response: {e}") from e
        logger.debug("Fetched %d open PRs for %s", len(prs), user)
        return prs

    def get_pr(self, repo_root: Path, pr_number: int) -> RemotePullRequest:
        operation = f"fetch PR #{pr_number}"
        cmd = ["gh", "pr", "view", str(pr_number), "--json", "id,title,number,body,url"]
        stdout = self._run(cmd, repo_root, operation=operation)
        try:
            return parse_pr_view(stdout)
        except ValueError as e:
            raise GitHubCliError(operation, f"malformed response: {e}") from e

    def create_pr(
        self,
        repo_root: Path,
        *,
        base: str,
        title: str,
        body: str,
        reviewers: list[str],
    ) -> str:
        cmd = build_create_pr_command(base=base, title=title, body=body, reviewers=reviewers)
        stdout = self._run(cmd, repo_root, operation=f"create pull request into '{base}'")
        # gh prints the PR URL as the last line
        return stdout.strip().splitlines()[-1] if stdout.strip() else ""

    def update_pr_body(self, repo_root: Path, pr_number: int, repo_ref: str, body: str) -> str:
        cmd = build_update_pr_body_command(pr_number, repo_ref, body)
        stdout = self._run(cmd, repo_root, operation=f"update PR #{pr_number} in {repo_ref}")
        return stdout.strip()
