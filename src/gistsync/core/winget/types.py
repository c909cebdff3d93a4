"""Types and exit codes for winget invocations."""

from dataclasses import dataclass

# winget reports failures as HRESULTs. These mean "nothing to apply" and are
# treated as a successful install.
APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE = -1978335189  # 0x8A15002B
APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED = -1978335135  # 0x8A150061

NOOP_SUCCESS_EXIT_CODES: frozenset[int] = frozenset(
    {
        APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE,
        APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED,
    }
)

# Recorded for a package whose invocation raised instead of returning a code.
INVOCATION_ERROR_EXIT_CODE = -1


def to_signed_exit_code(code: int) -> int:
    """Convert an unsigned 32-bit process exit code to its signed value.

    Windows returns HRESULT exit codes as unsigned DWORDs (0x8A15002B ->
    2316632107); the rest of gistsync compares against signed values.
    """
    if code > 0x7FFFFFFF:
        return code - 0x100000000
    return code


@dataclass(frozen=True)
class WinGetResult:
    """Outcome of a single winget invocation."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
