"""No-op wrapper for manifest writes."""

import click

from gistsync.cli.output import user_output
from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.packages import PackageDefinition


class DryRunManifestStore(ManifestStore):
    """Wrapper that delegates reads and prints intended writes instead."""

    def __init__(self, wrapped: ManifestStore) -> None:
        self._wrapped = wrapped

    def get_packages(self) -> list[PackageDefinition]:
        return self._wrapped.get_packages()

    def save_packages(self, packages: list[PackageDefinition]) -> None:
        user_output(
            click.style("[DRY RUN] ", fg="yellow")
            + f"Would save manifest with {len(packages)} package(s)"
        )

    def get_packages_from_url(self, url: str) -> list[PackageDefinition]:
        return self._wrapped.get_packages_from_url(url)
