"""Fake prompter for testing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from git_pr.core.errors import PromptError, UserCancelledError
from git_pr.gateway.prompt.abc import Prompter

if TYPE_CHECKING:
    from git_pr.cli.config import FormField
    from git_pr.core.lineage import BranchInfo
    from git_pr.core.tags import TagHistory


class FakePrompter(Prompter):
    """In-memory prompter that returns scripted answers.

    Unscripted answers fall back to what a user pressing enter would get: the
    default title, the most recent tag, the first base, the field default and
    the first reviewer candidate. Setting `cancel_on` to a prompt name
    ("title", "tag", "base", "field", "reviewers") makes that prompt raise
    UserCancelledError.

    Mutation Tracking:
    -----------------
    - asked: name of each prompt shown, in order
    - info_lines: (label, value) per info() call
    """

    def __init__(
        self,
        *,
        title: str | None = None,
        tag: str | None = None,
        base: str | None = None,
        field_values: dict[str, str] | None = None,
        reviewers: list[str] | None = None,
        cancel_on: str | None = None,
    ) -> None:
        self._title = title
        self._tag = tag
        self._base = base
        self._field_values = field_values if field_values is not None else {}
        self._reviewers = reviewers
        self._cancel_on = cancel_on

        self._asked: list[str] = []
        self._info_lines: list[tuple[str, str]] = []

    def _ask(self, name: str) -> None:
        self._asked.append(name)
        if self._cancel_on == name:
            raise UserCancelledError()

    def prompt_title(self, branch_info: BranchInfo) -> str:
        self._ask("title")
        return self._title if self._title is not None else branch_info.default_title

    def prompt_tag(self, history: TagHistory) -> str:
        self._ask("tag")
        tag = self._tag if self._tag is not None else history.most_recent
        if tag is None:
            raise PromptError("No tag scripted and the tag history is empty")
        return tag

    def prompt_base(self, bases: list[str]) -> str:
        self._ask("base")
        if self._base is not None:
            return self._base
        return bases[0]

    def prompt_field(self, field: FormField) -> str | None:
        self._ask("field")
        value = self._field_values.get(field.name, field.default or "")
        if not value.strip():
            if field.required:
                raise PromptError(f"Field '{field.name}' is required but was left empty")
            return None
        return value

    def prompt_reviewers(self, candidates: list[str]) -> list[str]:
        self._ask("reviewers")
        if not candidates:
            return []
        if self._reviewers is not None:
            return list(self._reviewers)
        return candidates[:1]

    def info(self, label: str, value: str) -> None:
        self._info_lines.append((label, value))

    @property
    def asked(self) -> list[str]:
        """Names of the prompts shown, in order.

        This property is for test assertions only.
        """
        return list(self._asked)

    @property
    def info_lines(self) -> list[tuple[str, str]]:
        """(label, value) for each info() call.

        This property is for test assertions only.
        """
        return list(self._info_lines)
