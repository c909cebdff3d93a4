"""winget invocation subpackage.

This subpackage provides the boundary that runs winget, with support for
testing via fakes and dry-run via a no-op implementation.
"""

from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.dry_run import DryRunWinGet
from gistsync.core.winget.real import RealWinGet
from gistsync.core.winget.types import NOOP_SUCCESS_EXIT_CODES, WinGetResult

__all__ = [
    "WinGet",
    "RealWinGet",
    "DryRunWinGet",
    "WinGetResult",
    "NOOP_SUCCESS_EXIT_CODES",
]
