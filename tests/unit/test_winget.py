"""Tests for the winget invocation boundary and the winget-backed inventory."""

import subprocess
from unittest.mock import Mock, patch

import pytest

from gistsync.core.inventory.real import (
    APPINSTALLER_CLI_ERROR_NO_APPLICATIONS_FOUND,
    WinGetPackageInventory,
)
from gistsync.core.packages import LocalPackage, PinRecord
from gistsync.core.winget.dry_run import DryRunWinGet
from gistsync.core.winget.real import RealWinGet, resolve_winget_executable
from gistsync.core.winget.types import (
    APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED,
    APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE,
    NOOP_SUCCESS_EXIT_CODES,
    to_signed_exit_code,
)


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> Mock:
    result = Mock(spec=subprocess.CompletedProcess)
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def test_noop_success_codes_are_signed_hresults() -> None:
    assert NOOP_SUCCESS_EXIT_CODES == frozenset({-1978335189, -1978335135})
    assert APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE == to_signed_exit_code(0x8A15002B)
    assert APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED == to_signed_exit_code(0x8A150061)


@pytest.mark.parametrize(
    ("code", "expected"),
    [(0, 0), (1, 1), (-1, -1), (0xFFFFFFFF, -1), (0x7FFFFFFF, 0x7FFFFFFF)],
)
def test_to_signed_exit_code(code: int, expected: int) -> None:
    assert to_signed_exit_code(code) == expected


def test_configured_winget_path_wins() -> None:
    with patch("gistsync.core.winget.real.shutil.which", return_value="/usr/bin/winget"):
        assert resolve_winget_executable("D:\\winget.exe") == "D:\\winget.exe"


def test_winget_found_on_path() -> None:
    with patch("gistsync.core.winget.real.shutil.which", return_value="C:\\bin\\winget.exe"):
        assert resolve_winget_executable() == "C:\\bin\\winget.exe"


def test_winget_falls_back_to_app_installer_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCALAPPDATA", "C:\\Users\\me\\AppData\\Local")
    with patch("gistsync.core.winget.real.shutil.which", return_value=None):
        resolved = resolve_winget_executable()

    assert resolved.endswith("winget.exe")
    assert "WindowsApps" in resolved


def test_real_winget_normalizes_unsigned_exit_code() -> None:
    with (
        patch("gistsync.core.winget.real.shutil.which", return_value="winget"),
        patch("gistsync.core.winget.real.subprocess.run") as mock_run,
    ):
        mock_run.return_value = _completed(0x8A150061, stdout="Found an existing package")

        result = RealWinGet().run(["install", "--id", "Git.Git"])

    assert result.exit_code == APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED
    assert result.stdout == "Found an existing package"
    assert not result.succeeded
    assert mock_run.call_args.args[0] == ["winget", "install", "--id", "Git.Git"]
    assert mock_run.call_args.kwargs["check"] is False


def test_real_winget_propagates_launch_errors() -> None:
    with (
        patch("gistsync.core.winget.real.shutil.which", return_value="winget"),
        patch("gistsync.core.winget.real.subprocess.run", side_effect=FileNotFoundError("winget")),
        pytest.raises(OSError),
    ):
        RealWinGet().run(["install", "--id", "Git.Git"])


def test_dry_run_winget_prints_and_succeeds(capsys: pytest.CaptureFixture[str]) -> None:
    result = DryRunWinGet().run(["uninstall", "--id", "Foo.Bar"])

    assert result.exit_code == 0
    assert "Would run: winget uninstall --id Foo.Bar" in capsys.readouterr().err


LIST_OUTPUT = (
    "Name  Id       Version Available Source\n"
    "---------------------------------------\n"
    "Git   Git.Git  2.43.0  2.44.0    winget\n"
)


def _inventory() -> WinGetPackageInventory:
    with patch("gistsync.core.winget.real.shutil.which", return_value="winget"):
        return WinGetPackageInventory()


def test_inventory_list_installed() -> None:
    with patch("gistsync.core.inventory.real.run_subprocess_with_context") as mock_run:
        mock_run.return_value = _completed(0, stdout=LIST_OUTPUT)

        packages = _inventory().list_installed()

    assert packages == [
        LocalPackage(
            id="Git.Git", name="Git", version="2.43.0", available_version="2.44.0", source="winget"
        )
    ]
    cmd = mock_run.call_args.args[0]
    assert cmd[:2] == ["winget", "list"]
    assert mock_run.call_args.kwargs["check"] is False


def test_inventory_find_by_id_uses_exact_match() -> None:
    with patch("gistsync.core.inventory.real.run_subprocess_with_context") as mock_run:
        mock_run.return_value = _completed(0, stdout=LIST_OUTPUT)

        package = _inventory().find_by_id("git.git")

    assert package is not None
    assert package.id == "Git.Git"
    cmd = mock_run.call_args.args[0]
    assert cmd[1:5] == ["list", "--id", "git.git", "--exact"]


def test_inventory_find_by_id_not_found() -> None:
    with patch("gistsync.core.inventory.real.run_subprocess_with_context") as mock_run:
        mock_run.return_value = _completed(
            to_signed_exit_code(0x8A150014),
            stdout="No installed package found matching input criteria.",
        )

        assert _inventory().find_by_id("Missing.Package") is None
    assert APPINSTALLER_CLI_ERROR_NO_APPLICATIONS_FOUND == to_signed_exit_code(0x8A150014)


def test_inventory_raises_on_unexpected_exit_code() -> None:
    with patch("gistsync.core.inventory.real.run_subprocess_with_context") as mock_run:
        mock_run.return_value = _completed(1, stderr="source unavailable")

        with pytest.raises(RuntimeError, match="source unavailable"):
            _inventory().list_installed()


def test_inventory_list_pins() -> None:
    output = (
        "Name Id      Version Source Pin type Pinned version\n"
        "---------------------------------------------------\n"
        "Git  Git.Git 2.43.0  winget Gating   2.43.*\n"
    )
    with patch("gistsync.core.inventory.real.run_subprocess_with_context") as mock_run:
        mock_run.return_value = _completed(0, stdout=output)

        pins = _inventory().list_pins()

    assert pins == [PinRecord(id="Git.Git", pin_type="Gating", pinned_version="2.43.*")]
    assert mock_run.call_args.args[0][1:3] == ["pin", "list"]
