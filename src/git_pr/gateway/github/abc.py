"""Abstract interface for the GitHub operations git-pr needs."""

from abc import ABC, abstractmethod
from pathlib import Path

from git_pr.gateway.github.types import RemotePullRequest


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real, dry-run, fake) must implement this interface.
    Failures are reported as GitHubCliError.
    """

    @abstractmethod
    def get_authenticated_user(self, repo_root: Path) -> str:
        """Get the login of the user gh is authenticated as."""
        ...

    @abstractmethod
    def list_assignable_users(self, repo_root: Path) -> list[str]:
        """List logins that can be requested as reviewers on the current repository."""
        ...

    @abstractmethod
    def list_my_open_prs(self, repo_root: Path, user: str) -> list[RemotePullRequest]:
        """List the most recent open pull requests authored by a user.

        Args:
            repo_root: Working directory for gh
            user: GitHub login whose PRs to list
        """
        ...

    @abstractmethod
    def get_pr(self, repo_root: Path, pr_number: int) -> RemotePullRequest:
        """Fetch a single pull request of the current repository by number."""
        ...

    @abstractmethod
    def create_pr(
        self,
        repo_root: Path,
        *,
        base: str,
        title: str,
        body: str,
        reviewers: list[str],
    ) -> str:
        """Create a pull request for the current branch, assigned to the caller.

        Returns:
            URL of the created PR (or a notice in dry-run mode)
        """
        ...

    @abstractmethod
    def update_pr_body(self, repo_root: Path, pr_number: int, repo_ref: str, body: str) -> str:
        """Replace the body of a pull request.

        Args:
            repo_root: Working directory for gh
            pr_number: PR number
            repo_ref: "owner/repo" the PR lives in
            body: New body

        Returns:
            Status text reported by gh (or a notice in dry-run mode)
        """
        ...
