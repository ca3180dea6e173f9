"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from git_pr.cli.config import GitPrConfig, load_config, resolve_config_dir
from git_pr.gateway.git.abc import Git
from git_pr.gateway.git.real import RealGit
from git_pr.gateway.github.abc import GitHub
from git_pr.gateway.github.dry_run import DryRunGitHub
from git_pr.gateway.github.real import RealGitHub
from git_pr.gateway.prompt.abc import Prompter
from git_pr.gateway.prompt.real import ClickPrompter


@dataclass(frozen=True)
class GitPrContext:
    """Immutable context holding all dependencies for git-pr operations.

    Created at the CLI entry point and threaded through the workflow. Tests
    build it directly with fake gateways.
    """

    git: Git
    github: GitHub
    prompter: Prompter
    config: GitPrConfig
    cwd: Path
    dry_run: bool


def create_context(*, config_option: Path | None, dry_run: bool) -> GitPrContext:
    """Create production context with real implementations.

    Args:
        config_option: Value of --config, None to fall back to the environment
            and then the default directory
        dry_run: If True, wrap the GitHub gateway so mutating calls only print
            the gh command they would run

    Raises:
        ConfigError: If config.toml cannot be loaded
    """
    config = load_config(resolve_config_dir(config_option))

    github: GitHub = RealGitHub()
    if dry_run:
        github = DryRunGitHub(github)

    return GitPrContext(
        git=RealGit(),
        github=github,
        prompter=ClickPrompter(config.prompt_style),
        config=config,
        cwd=Path.cwd(),
        dry_run=dry_run,
    )
