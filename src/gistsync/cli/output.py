"""Output utilities for CLI commands with clear intent.

user_output writes diagnostics and progress to stderr; machine_output writes
data meant for piping (exported manifests, config values) to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Output informational message for human users (stderr)."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Output structured data for machine consumption (stdout)."""
    click.echo(message, nl=nl)
