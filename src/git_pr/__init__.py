"""git-pr CLI entry point.

This package provides a Click-based CLI that opens pull requests for the
current feature branch and keeps the "related PRs" section of every open PR
sharing the same tag in sync. See `git-pr --help` for details.
"""

from git_pr.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `git-pr` console script."""
    cli()
