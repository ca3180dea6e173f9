import logging
from dataclasses import replace
from pathlib import Path

import click

from git_pr.core.context import GitPrContext, create_context
from git_pr.core.errors import GitPrError, UserCancelledError
from git_pr.core.workflow import run_workflow
from git_pr.gateway.github.dry_run import DryRunGitHub
from git_pr.output import user_output

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

logger = logging.getLogger(__name__)


def _ensure_dry_run(ctx: GitPrContext) -> GitPrContext:
    if isinstance(ctx.github, DryRunGitHub):
        return ctx
    return replace(ctx, github=DryRunGitHub(ctx.github), dry_run=True)


@click.command("git-pr", context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="git-pr")
@click.option(
    "-u",
    "--update-only",
    is_flag=True,
    help="Only update the related-PR section of existing PRs, without creating a new PR.",
)
@click.option(
    "-d",
    "--dry-run",
    is_flag=True,
    help="Print the gh commands that would create or update PRs instead of running them.",
)
@click.option(
    "-c",
    "--config",
    "config_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory (default: $GIT_PR_CONFIG or ~/.config/git-pr).",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    update_only: bool,
    dry_run: bool,
    config_dir: Path | None,
    debug: bool,
) -> None:
    """Create a GitHub pull request for the current branch and cross-link related PRs.

    The base branch is the branch the current one forked from. When a unique
    commit carries a tag such as [TRACK-123], its message becomes the title;
    otherwise title and tag are asked for. Every open PR of yours with the same
    tag gets its related-PR section rewritten to list all of them.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    try:
        # Only create context if not already provided (e.g., by tests)
        if ctx.obj is None:
            ctx.obj = create_context(config_option=config_dir, dry_run=dry_run)
        elif dry_run:
            ctx.obj = _ensure_dry_run(ctx.obj)

        run_workflow(ctx.obj, update_only=update_only)
    except UserCancelledError:
        logger.debug("Cancelled by user")
        raise SystemExit(1) from None
    except GitPrError as e:
        user_output(click.style("Error: ", fg="red") + e.message)
        raise SystemExit(1) from None
