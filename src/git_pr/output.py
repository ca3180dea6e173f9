"""User-facing output helpers.

Status lines, warnings and dry-run previews go to stderr so that stdout only
carries the values other tools may want to consume (the published PR URL).
"""

import sys

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a message for the user to stderr."""
    click.echo(message, file=sys.stderr, nl=nl)


def machine_output(message: str) -> None:
    """Write a value meant for scripts to stdout."""
    click.echo(message)
