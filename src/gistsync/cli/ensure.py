"""CLI error handling utilities with styled output.

All errors use a red "Error:" prefix and exit with status 1.
"""

import subprocess
from collections.abc import Iterator
from contextlib import contextmanager

import click

from gistsync.cli.output import user_output
from gistsync.core.manifest import ManifestParseError, ManifestUnavailableError


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    @contextmanager
    def command_errors() -> Iterator[None]:
        """Turn manifest and winget errors raised in a command into exit status 1."""
        try:
            yield
        except (
            ManifestUnavailableError,
            ManifestParseError,
            OSError,
            RuntimeError,
            subprocess.SubprocessError,
            ValueError,
        ) as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e
