"""Package data types shared by the manifest, inventory and sync layers.

PackageDefinition is a manifest entry (desired state). LocalPackage and
PinRecord are read-only snapshots of what winget reports on this machine.
The *Options types carry CLI arguments for direct, non-manifest-driven
operations.
"""

from dataclasses import dataclass


def normalize_id(package_id: str) -> str:
    """Return the case-insensitive lookup key for a package id."""
    return package_id.casefold()


@dataclass(frozen=True)
class PackageDefinition:
    """One entry of the package manifest.

    The id is the manifest key and is compared case-insensitively. Every other
    field is optional; fields at their default value are omitted when the
    manifest is written back.
    """

    id: str
    version: str | None = None
    pin: str | None = None
    pin_type: str | None = None
    uninstall: bool = False
    scope: str | None = None
    architecture: str | None = None
    location: str | None = None
    locale: str | None = None
    header: str | None = None
    installer_type: str | None = None
    custom: str | None = None
    override: str | None = None
    log: str | None = None
    force: bool = False
    skip_dependencies: bool = False
    allow_hash_mismatch: bool = False
    accept_package_agreements: bool = False
    accept_source_agreements: bool = False
    interactive: bool = False
    silent: bool = False

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Package id is required")

    def same_id(self, other_id: str) -> bool:
        return normalize_id(self.id) == normalize_id(other_id)

    @property
    def install_version(self) -> str | None:
        """Version requested on install: an explicit pin always beats version."""
        if self.pin:
            return self.pin
        if self.version:
            return self.version
        return None


@dataclass(frozen=True)
class LocalPackage:
    """An installed package as reported by winget."""

    id: str
    name: str
    version: str
    available_version: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class PinRecord:
    """A pin as reported by `winget pin list`."""

    id: str
    pin_type: str
    pinned_version: str | None = None


@dataclass(frozen=True)
class InstallOptions:
    """Arguments of a direct `install` command."""

    id: str
    version: str | None = None
    scope: str | None = None
    architecture: str | None = None
    location: str | None = None
    locale: str | None = None
    header: str | None = None
    installer_type: str | None = None
    custom: str | None = None
    override: str | None = None
    log: str | None = None
    force: bool = False
    skip_dependencies: bool = False
    allow_hash_mismatch: bool = False
    accept_package_agreements: bool = False
    accept_source_agreements: bool = False
    interactive: bool = False
    silent: bool = False


@dataclass(frozen=True)
class UpgradeOptions:
    """Arguments of a direct `upgrade` command (no custom header)."""

    id: str
    version: str | None = None
    scope: str | None = None
    architecture: str | None = None
    location: str | None = None
    locale: str | None = None
    installer_type: str | None = None
    custom: str | None = None
    override: str | None = None
    log: str | None = None
    force: bool = False
    skip_dependencies: bool = False
    allow_hash_mismatch: bool = False
    accept_package_agreements: bool = False
    accept_source_agreements: bool = False
    interactive: bool = False
    silent: bool = False


@dataclass(frozen=True)
class UninstallOptions:
    """Arguments of a direct `uninstall` command."""

    id: str
    scope: str | None = None
    interactive: bool = False
    silent: bool = False
    force: bool = False


def find_package(packages: list[PackageDefinition], package_id: str) -> PackageDefinition | None:
    """Find a manifest entry by id (case-insensitive)."""
    for package in packages:
        if package.same_id(package_id):
            return package
    return None


def without_package(
    packages: list[PackageDefinition], package_id: str
) -> list[PackageDefinition]:
    """Return the manifest entries minus the one matching package_id."""
    return [p for p in packages if not p.same_id(package_id)]
