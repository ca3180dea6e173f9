"""Abstract interface for interactive prompts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from git_pr.cli.config import FormField
    from git_pr.core.lineage import BranchInfo
    from git_pr.core.tags import TagHistory


@dataclass(frozen=True)
class PromptStyle:
    """Styling applied to prompts and status lines.

    Passed explicitly to the prompt implementation instead of living in a
    process-wide setting.
    """

    prefix: str = ">"
    color: str = "bright_green"
    highlight: str = "bright_cyan"


class Prompter(ABC):
    """Abstract interface for the questions git-pr asks the user.

    Every method raises UserCancelledError when the user aborts the prompt.
    """

    @abstractmethod
    def prompt_title(self, branch_info: BranchInfo) -> str:
        """Ask for the PR title, suggesting the branch's unique commits."""
        ...

    @abstractmethod
    def prompt_tag(self, history: TagHistory) -> str:
        """Ask for the PR tag, defaulting to the most recently used one."""
        ...

    @abstractmethod
    def prompt_base(self, bases: list[str]) -> str:
        """Ask which base branch to target when there is more than one candidate."""
        ...

    @abstractmethod
    def prompt_field(self, field: FormField) -> str | None:
        """Ask for the value of a configured form field.

        Returns:
            The entered text, or None when an optional field is left empty

        Raises:
            PromptError: If a required field is left empty
        """
        ...

    @abstractmethod
    def prompt_reviewers(self, candidates: list[str]) -> list[str]:
        """Ask which reviewers to request. Returns [] when there are no candidates."""
        ...

    @abstractmethod
    def info(self, label: str, value: str) -> None:
        """Show a "> label: value" status line."""
        ...
