"""Terminal prompts built on click."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

import click

from git_pr.core.errors import PromptError, UserCancelledError
from git_pr.core.tags import is_valid_tag, normalize_tag
from git_pr.gateway.prompt.abc import Prompter, PromptStyle
from git_pr.output import user_output

if TYPE_CHECKING:
    from git_pr.cli.config import FormField
    from git_pr.core.lineage import BranchInfo
    from git_pr.core.tags import TagHistory

T = TypeVar("T")

# Typing "TRACK*" at the tag prompt expands to the most recent matching tag.
COMPLETION_SUFFIX = "*"


def _cancellable(func: Callable[[], T]) -> T:
    try:
        return func()
    except (KeyboardInterrupt, click.Abort):
        user_output("")
        raise UserCancelledError() from None


def parse_selection(text: str, count: int) -> list[int]:
    """Parse "1, 3" into zero-based indexes, rejecting anything outside 1..count."""
    indexes: list[int] = []
    for part in text.replace(",", " ").split():
        if not part.isdigit() or not 1 <= int(part) <= count:
            raise click.BadParameter(f"'{part}' is not a number between 1 and {count}")
        index = int(part) - 1
        if index not in indexes:
            indexes.append(index)
    return indexes


class ClickPrompter(Prompter):
    """Prompter that asks on the terminal. Prompts and status lines go to stderr."""

    def __init__(self, style: PromptStyle) -> None:
        self._style = style

    def _label(self, text: str) -> str:
        return f"{click.style(self._style.prefix, fg=self._style.color)} {text}"

    def _show_numbered(self, items: list[str]) -> None:
        for i, item in enumerate(items, 1):
            user_output(f"  {click.style(str(i), dim=True)} {item}")

    def prompt_title(self, branch_info: BranchInfo) -> str:
        suggestions = branch_info.title_suggestions("")
        if suggestions:
            user_output(self._label("Commits on this branch:"))
            self._show_numbered(suggestions)

        def convert(value: str) -> str:
            value = value.strip()
            if value.isdigit() and 1 <= int(value) <= len(suggestions):
                return suggestions[int(value) - 1]
            if not value:
                raise click.BadParameter("Title cannot be empty")
            return value

        return _cancellable(
            lambda: click.prompt(
                self._label("PR title"),
                default=branch_info.default_title or None,
                value_proc=convert,
                err=True,
            )
        )

    def prompt_tag(self, history: TagHistory) -> str:
        def convert(value: str) -> str:
            value = value.strip()
            if value.endswith(COMPLETION_SUFFIX):
                prefix = normalize_tag(value.removesuffix(COMPLETION_SUFFIX))
                matches = history.suggestions(prefix)
                if not matches:
                    raise click.BadParameter(f"No recent tag starts with '{prefix}'")
                if len(matches) > 1:
                    others = click.style(", ".join(matches[1:]), dim=True)
                    user_output(self._label(f"Also matching: {others}"))
                return matches[0]
            if not is_valid_tag(value):
                raise click.BadParameter(f"'{value}' is not a valid tag, e.g. TRACK-123")
            return normalize_tag(value)

        if not history.is_empty():
            recent = ", ".join(history)
            user_output(self._label(f"Recent tags: {click.style(recent, dim=True)}"))

        return _cancellable(
            lambda: click.prompt(
                self._label("PR Tag"),
                default=history.most_recent,
                value_proc=convert,
                err=True,
            )
        )

    def prompt_base(self, bases: list[str]) -> str:
        if len(bases) == 1:
            return bases[0]
        user_output(self._label("Base branch candidates:"))
        self._show_numbered(bases)
        choice = _cancellable(
            lambda: click.prompt(
                self._label("PR base"),
                type=click.IntRange(1, len(bases)),
                default=1,
                err=True,
            )
        )
        return bases[choice - 1]

    def prompt_field(self, field: FormField) -> str | None:
        if field.field_type == "editor":
            user_output(self._label(f"{field.prompt} (opening editor)"))
            edited = _cancellable(lambda: click.edit(text=field.default or "", require_save=False))
            value = edited if edited is not None else ""
        else:
            value = _cancellable(
                lambda: click.prompt(
                    self._label(field.prompt),
                    default=field.default or "",
                    show_default=field.default is not None,
                    err=True,
                )
            )

        if not value.strip():
            if field.required:
                raise PromptError(f"Field '{field.name}' is required but was left empty")
            return None
        return value.strip("\n")

    def prompt_reviewers(self, candidates: list[str]) -> list[str]:
        if not candidates:
            return []
        user_output(self._label("Reviewers:"))
        self._show_numbered(candidates)

        def convert(value: str) -> list[int]:
            indexes = parse_selection(value, len(candidates))
            if not indexes:
                raise click.BadParameter("Select at least one reviewer")
            return indexes

        indexes = _cancellable(
            lambda: click.prompt(
                self._label("Select reviewers (e.g. 1,3)"),
                value_proc=convert,
                err=True,
            )
        )
        selected = [candidates[i] for i in indexes]
        self.info("Reviewers", ", ".join(selected))
        return selected

    def info(self, label: str, value: str) -> None:
        user_output(self._label(f"{label}: {click.style(value, fg=self._style.highlight)}"))
