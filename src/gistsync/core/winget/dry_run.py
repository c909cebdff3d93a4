"""No-op implementation of winget invocations for --dry-run."""

import click

from gistsync.cli.output import user_output
from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.types import WinGetResult


class DryRunWinGet(WinGet):
    """Prints what would run instead of running it.

    Every call through the WinGet interface mutates the machine (reads go
    through PackageInventory), so nothing is delegated and each call reports
    exit code 0.
    """

    def run(self, args: list[str]) -> WinGetResult:
        """Print the command and report success without executing."""
        user_output(click.style("[DRY RUN] ", fg="yellow") + "Would run: winget " + " ".join(args))
        return WinGetResult(exit_code=0, stdout="", stderr="")
