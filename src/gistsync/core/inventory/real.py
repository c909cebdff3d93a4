"""Package inventory backed by `winget list` and `winget pin list`."""

import logging

from gistsync.core.inventory.abc import PackageInventory
from gistsync.core.inventory.parsing import (
    id_matches,
    parse_list_output,
    parse_pin_list_output,
)
from gistsync.core.packages import LocalPackage, PinRecord
from gistsync.core.subprocess import run_subprocess_with_context
from gistsync.core.winget.real import resolve_winget_executable
from gistsync.core.winget.types import to_signed_exit_code

logger = logging.getLogger(__name__)

# "No installed package found matching input criteria."
APPINSTALLER_CLI_ERROR_NO_APPLICATIONS_FOUND = -1978335212  # 0x8A150014

_QUERY_FLAGS = ["--accept-source-agreements", "--disable-interactivity"]


class WinGetPackageInventory(PackageInventory):
    """Reads installed packages and pins by parsing winget's table output."""

    def __init__(self, executable: str | None = None) -> None:
        self._executable = resolve_winget_executable(executable)

    def _query(self, args: list[str], operation_context: str) -> str:
        result = run_subprocess_with_context(
            [self._executable, *args],
            operation_context=operation_context,
            check=False,
        )
        exit_code = to_signed_exit_code(result.returncode)
        if exit_code not in (0, APPINSTALLER_CLI_ERROR_NO_APPLICATIONS_FOUND):
            detail = result.stderr.strip() or result.stdout.strip()
            raise RuntimeError(
                f"Failed to {operation_context}: winget exited with {exit_code}"
                + (f"\n{detail}" if detail else "")
            )
        return result.stdout

    def find_by_id(self, package_id: str) -> LocalPackage | None:
        output = self._query(
            ["list", "--id", package_id, "--exact", *_QUERY_FLAGS],
            operation_context=f"look up installed package '{package_id}'",
        )
        for package in parse_list_output(output):
            if id_matches(package.id, package_id):
                logger.debug("Found %s %s", package.id, package.version)
                return package
        return None

    def list_installed(self) -> list[LocalPackage]:
        output = self._query(["list", *_QUERY_FLAGS], operation_context="list installed packages")
        return parse_list_output(output)

    def list_pins(self) -> list[PinRecord]:
        output = self._query(["pin", "list", *_QUERY_FLAGS], operation_context="list pins")
        return parse_pin_list_output(output)
