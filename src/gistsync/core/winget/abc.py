"""Abstract base class for winget invocations."""

from abc import ABC, abstractmethod

from gistsync.core.winget.types import WinGetResult


class WinGet(ABC):
    """Runs one winget operation per call.

    This is the only boundary that mutates the machine. All implementations
    (real, dry-run and fake) must implement this interface.
    """

    @abstractmethod
    def run(self, args: list[str]) -> WinGetResult:
        """Run winget with the given arguments.

        Args:
            args: Arguments after the executable, e.g. ["install", "--id", "Git.Git"]

        Returns:
            WinGetResult with the signed exit code and captured output

        Raises:
            OSError: If the winget process cannot be started
        """
        ...
