"""Subprocess execution with rich error context for the integration layer."""

import subprocess
from collections.abc import Sequence


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    *,
    input_text: str | None = None,
    timeout: float | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a command, capturing text output, and enrich failures.

    Wraps subprocess.run() to catch CalledProcessError and missing binaries
    and re-raise them as RuntimeError carrying the operation context, the
    command line, the exit code and any stderr/stdout output.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description, e.g. "list gists"
        input_text: Text piped to the process stdin
        timeout: Seconds before the process is killed
        check: Whether a non-zero exit raises

    Returns:
        CompletedProcess with decoded stdout/stderr

    Raises:
        RuntimeError: If the command fails, times out, or is not installed
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    try:
        return subprocess.run(
            list(cmd),
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=check,
            timeout=timeout,
        )

    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        stdout_stripped = (e.stdout or "").strip()
        if stdout_stripped:
            error_msg += f"\nstdout: {stdout_stripped}"

        stderr_stripped = (e.stderr or "").strip()
        if stderr_stripped:
            error_msg += f"\nstderr: {stderr_stripped}"

        raise RuntimeError(error_msg) from e

    except subprocess.TimeoutExpired as e:
        raise RuntimeError(
            f"Timed out after {timeout}s while trying to {operation_context}\nCommand: {cmd_str}"
        ) from e

    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e
