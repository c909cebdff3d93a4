"""Real winget implementation using subprocess."""

import logging
import os
import shutil
import subprocess
from pathlib import Path

from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.types import WinGetResult, to_signed_exit_code

logger = logging.getLogger(__name__)


def resolve_winget_executable(configured_path: str | None = None) -> str:
    """Locate winget.exe.

    Order: configured path, PATH lookup, then the App Installer alias under
    %LOCALAPPDATA%\\Microsoft\\WindowsApps.
    """
    if configured_path:
        return configured_path

    found = shutil.which("winget")
    if found is not None:
        return found

    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        return str(Path(local_app_data) / "Microsoft" / "WindowsApps" / "winget.exe")
    return "winget"


class RealWinGet(WinGet):
    """Production implementation that spawns winget.

    Invocations block until winget exits and are never timed out.
    """

    def __init__(self, executable: str | None = None) -> None:
        self._executable = resolve_winget_executable(executable)

    def run(self, args: list[str]) -> WinGetResult:
        cmd = [self._executable, *args]
        logger.debug("Running: %s", " ".join(cmd))
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        exit_code = to_signed_exit_code(result.returncode)
        logger.debug("winget exited with %d", exit_code)
        return WinGetResult(exit_code=exit_code, stdout=result.stdout, stderr=result.stderr)
