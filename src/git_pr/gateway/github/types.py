"""Type definitions for GitHub operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RemotePullRequest:
    """A pull request that already exists on GitHub.

    git-pr only ever reads these and rewrites their body.
    """

    id: str  # GraphQL node id
    title: str
    number: int
    resource_path: str  # e.g. "/owner/repo/pull/123"
    body: str

    @property
    def repo_ref(self) -> str | None:
        """The "owner/repo" the PR lives in, or None for a malformed resource path."""
        parts = self.resource_path.split("/")
        # ["", owner, repo, "pull", number]
        if len(parts) < 4 or not parts[1] or not parts[2]:
            return None
        return f"{parts[1]}/{parts[2]}"
