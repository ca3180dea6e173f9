"""The git-pr workflow: from the current branch to a published, cross-linked PR.

Steps, each a function so tests can drive them one at a time:

1. resolve the branch lineage (base candidates and unique commits)
2. build the draft: tag and title from the commits, or prompted
3. select the base branch
4. gather form fields and reviewers
5. render the body and create the PR
6. rewrite the related-PR block of every open PR sharing the tag

With --update-only, steps 3 to 5 are skipped.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

import click

from git_pr.core.context import GitPrContext
from git_pr.core.draft import PullRequestDraft
from git_pr.core.errors import (
    GitHubCliError,
    MissingTagError,
    NoBaseBranchError,
    NoCommitsError,
    NotInGitRepoError,
)
from git_pr.core.lineage import BranchInfo, resolve_branch_lineage
from git_pr.core.related import match_related_prs
from git_pr.core.tags import TagHistory, extract_from_many
from git_pr.core.template import has_related_section, render_body, rewrite_related_section
from git_pr.gateway.github.parsing import parse_pr_url
from git_pr.gateway.github.types import RemotePullRequest
from git_pr.gateway.prompt.abc import Prompter
from git_pr.output import machine_output, user_output

logger = logging.getLogger(__name__)

UpdateStatus = Literal["updated", "unchanged", "skipped", "failed"]


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of re-synchronizing the related-PR block of one PR."""

    pr_number: int
    status: UpdateStatus
    detail: str


@dataclass(frozen=True)
class WorkflowResult:
    draft: PullRequestDraft
    pr_url: str | None
    outcomes: tuple[UpdateOutcome, ...]


def build_draft_from_branch(
    prompter: Prompter, branch_info: BranchInfo, history: TagHistory
) -> PullRequestDraft:
    """Take tag and title from the first tagged unique commit, or ask for them.

    A tag found in the commits marks the PR as tracked and the commit message is
    used as the title unchanged. Otherwise the user picks a title and a tag and
    the title becomes "[TAG]: title". Either way the tag moves to the front of
    the history.

    Raises:
        MissingTagError: If no tag was found and none was entered
    """
    found = extract_from_many(branch_info.commits)
    if found is not None:
        tag, commit = found
        history.add_and_save(tag)
        prompter.info("PR title", commit)
        prompter.info("PR Tag", tag)
        return PullRequestDraft(title=commit, tag=tag, is_tracked=True)

    title = prompter.prompt_title(branch_info)
    tag = prompter.prompt_tag(history)
    if not tag:
        raise MissingTagError()
    history.add_and_save(tag)
    return PullRequestDraft(title=f"[{tag}]: {title}", tag=tag, is_tracked=False)


def select_base_branch(prompter: Prompter, branch_info: BranchInfo) -> str:
    """Pick the base branch, asking only when there is more than one candidate.

    Raises:
        NoBaseBranchError: If the branch shares no history with a local branch
    """
    bases = list(branch_info.bases)
    if not bases:
        raise NoBaseBranchError(branch_info.branch)
    if len(bases) > 1:
        return prompter.prompt_base(bases)
    prompter.info("PR base", bases[0])
    return bases[0]


def gather_pr_details(
    ctx: GitPrContext, repo_root: Path, draft: PullRequestDraft
) -> PullRequestDraft:
    """Prompt for every configured form field and for reviewers.

    Failing to list assignable users is not fatal: the PR is created without
    reviewers.
    """
    fields: dict[str, str] = {}
    for form_field in ctx.config.template.fields:
        value = ctx.prompter.prompt_field(form_field)
        if value is not None:
            fields[form_field.name] = value

    try:
        candidates = ctx.github.list_assignable_users(repo_root)
    except GitHubCliError as e:
        logger.debug("Listing assignable users failed: %s", e)
        user_output(click.style("Warning: ", fg="yellow") + f"{e.message}; skipping reviewers")
        candidates = []

    reviewers = ctx.prompter.prompt_reviewers(candidates)
    return replace(draft, fields=fields, reviewers=tuple(reviewers))


def publish_pr(ctx: GitPrContext, repo_root: Path, draft: PullRequestDraft) -> str:
    """Render the body and create the PR. Returns the PR URL (or dry-run notice)."""
    body = render_body(
        ctx.config.template,
        tag=draft.tag,
        is_tracked=draft.is_tracked,
        fields=draft.fields,
    )
    url = ctx.github.create_pr(
        repo_root,
        base=draft.base,
        title=draft.title,
        body=body,
        reviewers=list(draft.reviewers),
    )
    user_output(f"Published at: {url}")
    machine_output(url)
    return url


def resolve_github_user(ctx: GitPrContext, repo_root: Path) -> str:
    """The configured GitHub user, else the login gh is authenticated as."""
    if ctx.config.github_user is not None:
        return ctx.config.github_user
    return ctx.github.get_authenticated_user(repo_root)


def _include_created_pr(
    ctx: GitPrContext,
    repo_root: Path,
    related: list[RemotePullRequest],
    created_url: str | None,
) -> list[RemotePullRequest]:
    """Add the freshly created PR when the open-PR listing does not show it yet."""
    if created_url is None:
        return related
    parsed = parse_pr_url(created_url)
    if parsed is None:
        return related
    number, _ = parsed
    if any(pr.number == number for pr in related):
        return related
    logger.debug("PR #%d missing from the open-PR listing, fetching it", number)
    try:
        created = ctx.github.get_pr(repo_root, number)
    except GitHubCliError as e:
        user_output(click.style("Warning: ", fg="yellow") + e.message)
        return related
    return sorted([*related, created], key=lambda pr: pr.number)


def update_one_pr(
    ctx: GitPrContext,
    repo_root: Path,
    pr: RemotePullRequest,
    related: list[RemotePullRequest],
) -> UpdateOutcome:
    repo_ref = pr.repo_ref
    if repo_ref is None:
        detail = f"unrecognized resource path '{pr.resource_path}'"
        return UpdateOutcome(pr.number, "failed", detail)

    placeholders = ctx.config.template.placeholders
    if not has_related_section(pr.body, placeholders=placeholders):
        return UpdateOutcome(pr.number, "skipped", "no related-PR block")

    new_body = rewrite_related_section(pr.body, pr.number, related, placeholders=placeholders)
    if new_body == pr.body:
        return UpdateOutcome(pr.number, "unchanged", "related PRs already up to date")

    try:
        status = ctx.github.update_pr_body(repo_root, pr.number, repo_ref, new_body)
    except GitHubCliError as e:
        return UpdateOutcome(pr.number, "failed", e.message)
    return UpdateOutcome(pr.number, "updated", status)


def update_related_prs(
    ctx: GitPrContext,
    repo_root: Path,
    tag: str,
    *,
    created_url: str | None = None,
) -> list[UpdateOutcome]:
    """Rewrite the related-PR block of every open PR of the user sharing tag.

    Each PR is updated independently; a failure is reported and the remaining
    PRs are still updated.

    Raises:
        GitHubCliError: If the user or their open PRs cannot be fetched
    """
    user = resolve_github_user(ctx, repo_root)
    open_prs = ctx.github.list_my_open_prs(repo_root, user)
    match = match_related_prs(tag, open_prs)

    for pr in match.malformed:
        user_output(
            f"{click.style('x', fg='bright_red')} {click.style(pr.title, fg='bright_cyan')} "
            f"{click.style('No tag found', fg='bright_red')}"
        )

    related = _include_created_pr(ctx, repo_root, list(match.matched), created_url)
    prefix = click.style(ctx.config.prompt_style.prefix, fg=ctx.config.prompt_style.color)
    if not related:
        user_output(f"{prefix} No related PRs found.")
        return []

    user_output(f"{prefix} Found {len(related)} related PRs. Updating...")
    outcomes: list[UpdateOutcome] = []
    for pr in related:
        outcome = update_one_pr(ctx, repo_root, pr, related)
        logger.debug("PR #%d: %s (%s)", outcome.pr_number, outcome.status, outcome.detail)
        if outcome.status == "failed":
            mark = click.style("x", fg="red")
            user_output(f"{mark} Update #{outcome.pr_number} failed: {outcome.detail}")
        elif outcome.status == "unchanged":
            mark = click.style("=", dim=True)
            user_output(f"{mark} Unchanged #{outcome.pr_number}")
        elif outcome.status == "skipped":
            mark = click.style("-", fg="yellow")
            user_output(f"{mark} Skipped #{outcome.pr_number}: {outcome.detail}")
        else:
            mark = click.style("+", fg="bright_green")
            user_output(f"{mark} Updated #{outcome.pr_number}: {outcome.detail}")
        outcomes.append(outcome)
    return outcomes


def run_workflow(ctx: GitPrContext, *, update_only: bool) -> WorkflowResult:
    """Run the whole workflow against the repository containing ctx.cwd.

    Raises:
        GitPrError: Any failure; UserCancelledError when a prompt is aborted
    """
    if ctx.dry_run:
        user_output(click.style("Dry run: gh commands are printed, not run", dim=True))

    repo_root = ctx.git.get_repository_root(ctx.cwd)
    if repo_root is None:
        raise NotInGitRepoError()

    branch_info = resolve_branch_lineage(ctx.git, ctx.cwd, require_clean=not update_only)
    if not branch_info.commits:
        raise NoCommitsError(branch_info.branch)

    history = TagHistory.load(ctx.config.tags_path, max_size=ctx.config.max_tag_history)
    draft = build_draft_from_branch(ctx.prompter, branch_info, history)

    pr_url: str | None = None
    if not update_only:
        draft = replace(draft, base=select_base_branch(ctx.prompter, branch_info))
        draft = gather_pr_details(ctx, repo_root, draft)
        pr_url = publish_pr(ctx, repo_root, draft)

    outcomes = update_related_prs(ctx, repo_root, draft.tag, created_url=pr_url)
    return WorkflowResult(draft=draft, pr_url=pr_url, outcomes=tuple(outcomes))
