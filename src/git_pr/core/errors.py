"""Error hierarchy for git-pr.

Every failure the core can report is a subclass of GitPrError. The core only
raises; turning an error into a colored message and an exit code happens at
the CLI boundary (see git_pr.cli.cli).

Kinds:
- environment: the repository or branch is not in a state git-pr can work with
- repository access: reading the commit graph failed
- external collaborator: a gh invocation failed or returned garbage
- configuration: config.toml or the tag history is unreadable or invalid
- prompt: interactive input could not satisfy a requirement
- cancellation: the user aborted a prompt (silent exit)
"""

from pathlib import Path


class GitPrError(Exception):
    """Base class for all errors reported by git-pr."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ============================================================================
# Environment errors
# ============================================================================


class NotInGitRepoError(GitPrError):
    def __init__(self) -> None:
        super().__init__("Not in a git repository")


class BranchNotCleanError(GitPrError):
    def __init__(self) -> None:
        super().__init__(
            "Repository has an operation in progress (merge, rebase, cherry-pick, ...). "
            "Finish or abort it first."
        )


class DetachedHeadError(GitPrError):
    def __init__(self) -> None:
        super().__init__("HEAD is detached. Check out a feature branch first.")


class ProtectedBranchError(GitPrError):
    """The current branch can never be treated as a feature branch."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"Cannot run from protected branch: {branch}")
        self.branch = branch


class NoCommitsError(GitPrError):
    def __init__(self, branch: str) -> None:
        super().__init__(f"No commits found on branch '{branch}' that are not on another branch")
        self.branch = branch


class NoBaseBranchError(GitPrError):
    """No other branch shares history with the current branch."""

    def __init__(self, branch: str) -> None:
        super().__init__(
            f"Could not find a base branch for '{branch}': "
            "no other branch reaches any of its commits"
        )
        self.branch = branch


class MissingTagError(GitPrError):
    def __init__(self) -> None:
        super().__init__("No tag found in the branch commits and none was provided")


# ============================================================================
# Collaborator errors
# ============================================================================


class RepositoryAccessError(GitPrError):
    """Reading refs or commits from the repository failed."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"Failed to {operation}: {detail}")
        self.operation = operation
        self.detail = detail


class GitHubCliError(GitPrError):
    """A gh invocation failed, could not be launched, or returned malformed output."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"GitHub CLI failed to {operation}: {detail}")
        self.operation = operation
        self.detail = detail


class ConfigError(GitPrError):
    pass


class TagHistoryError(GitPrError):
    """The tag history file could not be read or written."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path


class PromptError(GitPrError):
    pass


class UserCancelledError(GitPrError):
    """The user aborted an interactive prompt. Not displayed as an error."""

    def __init__(self) -> None:
        super().__init__("User cancelled operation")
