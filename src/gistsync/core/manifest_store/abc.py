"""Abstract interface for reading and writing the package manifest."""

from abc import ABC, abstractmethod

from gistsync.core.packages import PackageDefinition


class ManifestStore(ABC):
    """Abstract interface for the stored manifest.

    The manifest is always read and written as one whole document.
    All implementations (real, fake, dry-run) must implement this interface.
    """

    @abstractmethod
    def get_packages(self) -> list[PackageDefinition]:
        """Read the manifest from its default location.

        Returns:
            Package definitions; empty when no manifest exists yet

        Raises:
            ManifestUnavailableError: If the manifest cannot be obtained
            ManifestParseError: If the stored document is malformed
        """
        ...

    @abstractmethod
    def save_packages(self, packages: list[PackageDefinition]) -> None:
        """Replace the stored manifest with the given packages, sorted by id."""
        ...

    @abstractmethod
    def get_packages_from_url(self, url: str) -> list[PackageDefinition]:
        """Read a manifest document from an explicit URL."""
        ...
