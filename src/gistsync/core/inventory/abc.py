"""Abstract base class for reading local package state."""

from abc import ABC, abstractmethod

from gistsync.core.packages import LocalPackage, PinRecord


class PackageInventory(ABC):
    """Read-only view of what is installed and pinned on this machine.

    Every call queries the package manager afresh; implementations must not
    cache across calls.
    """

    @abstractmethod
    def find_by_id(self, package_id: str) -> LocalPackage | None:
        """Look up one installed package.

        Args:
            package_id: Package id (case-insensitive)

        Returns:
            The installed package, or None if it is not installed
        """
        ...

    @abstractmethod
    def list_installed(self) -> list[LocalPackage]:
        """List every installed package."""
        ...

    @abstractmethod
    def list_pins(self) -> list[PinRecord]:
        """List every configured pin."""
        ...
