"""In-memory fake manifest store for testing."""

from gistsync.core.manifest import ManifestUnavailableError, sort_packages
from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.packages import PackageDefinition


class FakeManifestStore(ManifestStore):
    """In-memory fake implementation of ManifestStore.

    Every save is recorded in `saved` and becomes the current manifest.
    """

    def __init__(
        self,
        *,
        packages: list[PackageDefinition] | None = None,
        urls: dict[str, list[PackageDefinition]] | None = None,
        read_error: Exception | None = None,
    ) -> None:
        self._packages = list(packages or [])
        self._urls = dict(urls or {})
        self._read_error = read_error
        self._saved: list[list[PackageDefinition]] = []

    @property
    def packages(self) -> list[PackageDefinition]:
        return list(self._packages)

    @property
    def saved(self) -> list[list[PackageDefinition]]:
        """Package lists passed to save_packages(), in call order."""
        return self._saved

    def get_packages(self) -> list[PackageDefinition]:
        if self._read_error is not None:
            raise self._read_error
        return list(self._packages)

    def save_packages(self, packages: list[PackageDefinition]) -> None:
        self._packages = sort_packages(packages)
        self._saved.append(list(self._packages))

    def get_packages_from_url(self, url: str) -> list[PackageDefinition]:
        if url not in self._urls:
            raise ManifestUnavailableError(f"Failed to download manifest from {url}")
        return list(self._urls[url])
