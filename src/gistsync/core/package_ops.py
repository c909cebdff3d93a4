"""Direct package commands that write their outcome back to the manifest.

Each operation runs winget first and only touches the manifest when winget
succeeded, so the manifest never records a change that did not happen. The
manifest is always saved as a whole (full replace, sorted by id).
"""

import logging
from dataclasses import replace
from pathlib import Path

from gistsync.core.arguments import (
    build_install_args_from_options,
    build_pin_add_args,
    build_pin_remove_args,
    build_uninstall_args,
    build_upgrade_args,
)
from gistsync.core.context import GistSyncContext
from gistsync.core.manifest import ManifestUnavailableError, parse_manifest, serialize_manifest
from gistsync.core.packages import (
    InstallOptions,
    PackageDefinition,
    UninstallOptions,
    UpgradeOptions,
    find_package,
    without_package,
)

logger = logging.getLogger(__name__)

# Option fields shared by InstallOptions and PackageDefinition
_INSTALLER_FIELDS = (
    "scope",
    "architecture",
    "location",
    "locale",
    "header",
    "installer_type",
    "custom",
    "override",
    "log",
    "force",
    "skip_dependencies",
    "allow_hash_mismatch",
    "accept_package_agreements",
    "accept_source_agreements",
    "interactive",
    "silent",
)


def _save_with(
    ctx: GistSyncContext, packages: list[PackageDefinition], package: PackageDefinition
) -> None:
    ctx.manifest_store.save_packages([*without_package(packages, package.id), package])


def _run_pin_side_effect(ctx: GistSyncContext, args: list[str], package_id: str) -> None:
    result = ctx.winget.run(args)
    if result.exit_code != 0:
        verb = " ".join(args[:2])
        logger.warning("winget %s for %s exited with %d", verb, package_id, result.exit_code)
        ctx.feedback.warning(
            f"Could not update pin for {package_id} (exit code {result.exit_code})"
        )


def install_and_save(ctx: GistSyncContext, options: InstallOptions) -> int:
    """Install a package and record it in the manifest.

    When the manifest pins the package and no version was requested, the
    pinned version is installed and the pin is re-applied. Requesting a
    version for a pinned package moves the pin to that version.

    Returns:
        winget exit code; the manifest is only saved when it is 0
    """
    packages = ctx.manifest_store.get_packages()
    existing = find_package(packages, options.id)
    existing_pin = existing.pin if existing is not None else None
    pin_type = existing.pin_type if existing is not None else None

    pin_version: str | None = None
    if options.version:
        if existing_pin:
            pin_version = options.version
    elif existing_pin:
        pin_version = existing_pin
        options = replace(options, version=existing_pin)

    ctx.feedback.info(f"Installing {options.id}...")
    result = ctx.winget.run(build_install_args_from_options(options))
    if result.exit_code != 0:
        ctx.feedback.error(f"Failed to install {options.id}: exit code {result.exit_code}")
        return result.exit_code

    if pin_version:
        _run_pin_side_effect(ctx, build_pin_add_args(options.id, pin_version, pin_type), options.id)

    package = PackageDefinition(
        id=options.id,
        version=pin_version,
        pin=pin_version,
        pin_type=pin_type,
        uninstall=False,
        **{name: getattr(options, name) for name in _INSTALLER_FIELDS},
    )
    _save_with(ctx, packages, package)
    ctx.feedback.success(f"Installed {options.id}")
    return 0


def uninstall_and_save(ctx: GistSyncContext, options: UninstallOptions) -> int:
    """Uninstall a package and record a tombstone in the manifest."""
    packages = ctx.manifest_store.get_packages()
    existing = find_package(packages, options.id)

    ctx.feedback.info(f"Uninstalling {options.id}...")
    result = ctx.winget.run(build_uninstall_args(options))
    if result.exit_code != 0:
        ctx.feedback.error(f"Failed to uninstall {options.id}: exit code {result.exit_code}")
        return result.exit_code

    _run_pin_side_effect(ctx, build_pin_remove_args(options.id), options.id)

    tombstone = existing if existing is not None else PackageDefinition(id=options.id)
    tombstone = replace(tombstone, uninstall=True, pin=None, pin_type=None, version=None)
    _save_with(ctx, packages, tombstone)
    ctx.feedback.success(f"Uninstalled {options.id}")
    return 0


def upgrade_and_save(ctx: GistSyncContext, options: UpgradeOptions) -> int:
    """Upgrade a package and update the manifest where it tracks the package.

    A pinned entry has its pin moved to the upgraded version (the requested
    one, else the version now installed). The manifest is left alone for an
    entry that is present, not a tombstone and not pinned.
    """
    ctx.feedback.info(f"Upgrading {options.id}...")
    result = ctx.winget.run(build_upgrade_args(options))
    if result.exit_code != 0:
        ctx.feedback.error(f"Failed to upgrade {options.id}: exit code {result.exit_code}")
        return result.exit_code

    packages = ctx.manifest_store.get_packages()
    existing = find_package(packages, options.id)
    has_pin = existing is not None and bool(existing.pin)

    if existing is not None and not existing.uninstall and not has_pin:
        ctx.feedback.success(f"Upgraded {options.id}")
        return 0

    pin_version: str | None = None
    pin_type: str | None = None
    if existing is not None and has_pin:
        resolved = options.version
        if resolved is None:
            installed = ctx.inventory.find_by_id(options.id)
            resolved = installed.version if installed is not None else None
        pin_version = resolved or existing.pin
        pin_type = existing.pin_type
        _run_pin_side_effect(
            ctx, build_pin_add_args(options.id, pin_version, pin_type, force=True), options.id
        )

    package = existing if existing is not None else PackageDefinition(id=options.id)
    package = replace(
        package,
        uninstall=False,
        pin=pin_version,
        pin_type=pin_type if pin_version else None,
        version=pin_version,
    )
    package = _merge_upgrade_options(package, options)
    _save_with(ctx, packages, package)
    ctx.feedback.success(f"Upgraded {options.id}")
    return 0


def _merge_upgrade_options(package: PackageDefinition, options: UpgradeOptions) -> PackageDefinition:
    """Overlay the non-empty options onto the saved entry."""
    changes: dict[str, object] = {}
    for name in (
        "scope",
        "architecture",
        "location",
        "locale",
        "custom",
        "override",
        "installer_type",
    ):
        value = getattr(options, name)
        if value:
            changes[name] = value
    for name in (
        "force",
        "accept_package_agreements",
        "accept_source_agreements",
        "allow_hash_mismatch",
        "skip_dependencies",
    ):
        if getattr(options, name):
            changes[name] = True
    return replace(package, **changes)


def pin_add_and_save(
    ctx: GistSyncContext,
    package_id: str,
    version: str,
    pin_type: str | None = None,
    force: bool = False,
) -> int:
    """Pin a package and record the pin in the manifest.

    Without an explicit pin type, the manifest's existing pin type is kept.
    """
    packages = ctx.manifest_store.get_packages()
    existing = find_package(packages, package_id)
    pin_type = pin_type or (existing.pin_type if existing is not None else None)

    result = ctx.winget.run(build_pin_add_args(package_id, version, pin_type, force=force))
    if result.exit_code != 0:
        ctx.feedback.error(f"Failed to pin {package_id}: exit code {result.exit_code}")
        return result.exit_code

    package = existing if existing is not None else PackageDefinition(id=package_id)
    package = replace(package, uninstall=False, pin=version, pin_type=pin_type, version=version)
    _save_with(ctx, packages, package)
    ctx.feedback.success(f"Pinned {package_id} to {version}")
    return 0


def pin_remove_and_save(ctx: GistSyncContext, package_id: str) -> int:
    """Remove a package's pin and clear it from the manifest."""
    packages = ctx.manifest_store.get_packages()
    existing = find_package(packages, package_id)

    result = ctx.winget.run(build_pin_remove_args(package_id))
    if result.exit_code != 0:
        ctx.feedback.error(f"Failed to remove pin for {package_id}: exit code {result.exit_code}")
        return result.exit_code

    package = existing if existing is not None else PackageDefinition(id=package_id)
    package = replace(package, pin=None, pin_type=None, version=None)
    _save_with(ctx, packages, package)
    ctx.feedback.success(f"Removed pin for {package_id}")
    return 0


def export_packages(ctx: GistSyncContext, output_path: Path | None = None) -> str:
    """Export the ids of all installed packages as a manifest document.

    Writes the document to output_path when given and returns it either way.
    """
    installed = ctx.inventory.list_installed()
    document = serialize_manifest([PackageDefinition(id=p.id) for p in installed])

    if output_path is not None:
        output_path.write_text(document, encoding="utf-8")
        ctx.feedback.info(f"Exported {len(installed)} packages to {output_path}")
    return document


def import_packages(ctx: GistSyncContext, file_path: Path) -> int:
    """Replace the stored manifest with the contents of a local YAML file.

    Returns:
        Number of packages imported

    Raises:
        ManifestUnavailableError: If the file does not exist
        ManifestParseError: If the file is not a valid manifest
    """
    if not file_path.is_file():
        raise ManifestUnavailableError(f"File not found: {file_path}")

    packages = parse_manifest(file_path.read_text(encoding="utf-8"))
    ctx.manifest_store.save_packages(packages)
    ctx.feedback.info(f"Imported {len(packages)} packages to Gist")
    return len(packages)
