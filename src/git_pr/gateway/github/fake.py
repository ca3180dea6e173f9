"""Fake GitHub operations for testing."""

from dataclasses import replace
from pathlib import Path

from git_pr.core.errors import GitHubCliError
from git_pr.gateway.github.abc import GitHub
from git_pr.gateway.github.types import RemotePullRequest


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    State Management:
    -----------------
    Open PRs live in memory. create_pr() adds a PR (numbered after the highest
    existing one) unless `list_includes_created` is False, which simulates the
    GraphQL listing lagging behind a fresh PR. update_pr_body() rewrites the
    stored body, so later listings observe the change.

    Mutation Tracking:
    -----------------
    - created_prs: (base, title, body, reviewers) per create_pr() call
    - updated_bodies: (pr_number, repo_ref, body) per successful update_pr_body() call
    """

    def __init__(
        self,
        *,
        authenticated_user: str | None = "test-user",
        assignable_users: list[str] | None = None,
        open_prs: list[RemotePullRequest] | None = None,
        repo_ref: str = "owner/repo",
        list_includes_created: bool = True,
        update_failures: dict[int, str] | None = None,
        list_prs_error: str | None = None,
        assignable_users_error: str | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            authenticated_user: Login returned by get_authenticated_user, None to fail
            assignable_users: Logins returned by list_assignable_users
            open_prs: PRs returned by list_my_open_prs (for any user)
            repo_ref: "owner/repo" used for PRs created through create_pr
            list_includes_created: Whether created PRs show up in list_my_open_prs
            update_failures: Mapping of PR number -> error detail for update_pr_body
            list_prs_error: Error detail raised by list_my_open_prs
            assignable_users_error: Error detail raised by list_assignable_users
        """
        self._authenticated_user = authenticated_user
        self._assignable_users = assignable_users if assignable_users is not None else []
        self._open_prs = {pr.number: pr for pr in open_prs} if open_prs is not None else {}
        self._hidden_prs: dict[int, RemotePullRequest] = {}
        self._repo_ref = repo_ref
        self._list_includes_created = list_includes_created
        self._update_failures = update_failures if update_failures is not None else {}
        self._list_prs_error = list_prs_error
        self._assignable_users_error = assignable_users_error

        self._created_prs: list[tuple[str, str, str, list[str]]] = []
        self._updated_bodies: list[tuple[int, str, str]] = []

    def get_authenticated_user(self, repo_root: Path) -> str:
        if self._authenticated_user is None:
            raise GitHubCliError("get authenticated user", "not logged in")
        return self._authenticated_user

    def list_assignable_users(self, repo_root: Path) -> list[str]:
        if self._assignable_users_error is not None:
            raise GitHubCliError("list assignable users", self._assignable_users_error)
        return list(self._assignable_users)

    def list_my_open_prs(self, repo_root: Path, user: str) -> list[RemotePullRequest]:
        if self._list_prs_error is not None:
            raise GitHubCliError(f"list open pull requests of '{user}'", self._list_prs_error)
        return list(self._open_prs.values())

    def get_pr(self, repo_root: Path, pr_number: int) -> RemotePullRequest:
        if pr_number in self._open_prs:
            return self._open_prs[pr_number]
        if pr_number in self._hidden_prs:
            return self._hidden_prs[pr_number]
        raise GitHubCliError(f"fetch PR #{pr_number}", "no pull requests found")

    def create_pr(
        self,
        repo_root: Path,
        *,
        base: str,
        title: str,
        body: str,
        reviewers: list[str],
    ) -> str:
        self._created_prs.append((base, title, body, list(reviewers)))
        known = [*self._open_prs, *self._hidden_prs]
        number = max(known, default=0) + 1
        pr = RemotePullRequest(
            id=f"PR_{number}",
            title=title,
            number=number,
            resource_path=f"/{self._repo_ref}/pull/{number}",
            body=body,
        )
        if self._list_includes_created:
            self._open_prs[number] = pr
        else:
            self._hidden_prs[number] = pr
        return f"https://github.com/{self._repo_ref}/pull/{number}"

    def update_pr_body(self, repo_root: Path, pr_number: int, repo_ref: str, body: str) -> str:
        if pr_number in self._update_failures:
            raise GitHubCliError(
                f"update PR #{pr_number} in {repo_ref}", self._update_failures[pr_number]
            )
        self._updated_bodies.append((pr_number, repo_ref, body))
        for prs in (self._open_prs, self._hidden_prs):
            if pr_number in prs:
                prs[pr_number] = replace(prs[pr_number], body=body)
        return f"https://github.com/{repo_ref}/pull/{pr_number}"

    @property
    def created_prs(self) -> list[tuple[str, str, str, list[str]]]:
        """(base, title, body, reviewers) for each create_pr() call.

        This property is for test assertions only.
        """
        return list(self._created_prs)

    @property
    def updated_bodies(self) -> list[tuple[int, str, str]]:
        """(pr_number, repo_ref, body) for each successful update_pr_body() call.

        This property is for test assertions only.
        """
        return list(self._updated_bodies)
