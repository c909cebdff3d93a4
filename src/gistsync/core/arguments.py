"""Build winget command lines from package definitions and options.

All builders are pure. They emit the verb, then `--id <id>`, then
`--version` when a version was resolved, then boolean flags that are true,
then string options that are non-empty. Absent, empty or false values never
produce a flag.
"""

from gistsync.core.packages import (
    InstallOptions,
    PackageDefinition,
    UninstallOptions,
    UpgradeOptions,
)

PIN_TYPE_FLAGS: dict[str, str] = {
    "blocking": "--blocking",
    "gating": "--gating",
}


def _installer_flags(
    options: PackageDefinition | InstallOptions | UpgradeOptions, *, header: str | None
) -> list[str]:
    args: list[str] = []

    if options.silent:
        args.append("--silent")
    if options.interactive:
        args.append("--interactive")
    if options.force:
        args.append("--force")
    if options.accept_package_agreements:
        args.append("--accept-package-agreements")
    if options.accept_source_agreements:
        args.append("--accept-source-agreements")
    if options.allow_hash_mismatch:
        args.append("--ignore-security-hash")
    if options.skip_dependencies:
        args.append("--skip-dependencies")

    string_options = [
        ("--scope", options.scope),
        ("--architecture", options.architecture),
        ("--location", options.location),
        ("--log", options.log),
        ("--header", header),
        ("--custom", options.custom),
        ("--override", options.override),
        ("--installer-type", options.installer_type),
        ("--locale", options.locale),
    ]
    for flag, value in string_options:
        if value:
            args.extend([flag, value])

    return args


def build_install_args(package: PackageDefinition) -> list[str]:
    """Build `winget install` arguments for a manifest entry.

    A pinned entry installs its pinned version even when `version` is set.
    """
    args = ["install", "--id", package.id]
    version = package.install_version
    if version:
        args.extend(["--version", version])
    args.extend(_installer_flags(package, header=package.header))
    return args


def build_install_args_from_options(options: InstallOptions) -> list[str]:
    """Build `winget install` arguments for a direct install command."""
    args = ["install", "--id", options.id]
    if options.version:
        args.extend(["--version", options.version])
    args.extend(_installer_flags(options, header=options.header))
    return args


def build_upgrade_args(options: UpgradeOptions) -> list[str]:
    """Build `winget upgrade` arguments."""
    args = ["upgrade", "--id", options.id]
    if options.version:
        args.extend(["--version", options.version])
    args.extend(_installer_flags(options, header=None))
    return args


def build_uninstall_args(options: UninstallOptions | PackageDefinition) -> list[str]:
    """Build `winget uninstall` arguments.

    Only scope and the interactive/silent/force switches apply to uninstall.
    """
    args = ["uninstall", "--id", options.id]
    if options.silent:
        args.append("--silent")
    if options.interactive:
        args.append("--interactive")
    if options.force:
        args.append("--force")
    if options.scope:
        args.extend(["--scope", options.scope])
    return args


def pin_type_flag(pin_type: str | None) -> str | None:
    """Map a pin type to its exclusive winget flag, or None for no flag."""
    if not pin_type:
        return None
    return PIN_TYPE_FLAGS.get(pin_type.strip().casefold())


def build_pin_add_args(
    package_id: str, version: str, pin_type: str | None = None, force: bool = False
) -> list[str]:
    """Build `winget pin add` arguments.

    Args:
        package_id: Package to pin
        version: Version to pin to
        pin_type: "gating" or "blocking" (case-insensitive); other values add no flag
        force: Overwrite an existing pin
    """
    args = ["pin", "add", "--id", package_id, "--version", version]
    if force:
        args.append("--force")
    flag = pin_type_flag(pin_type)
    if flag is not None:
        args.append(flag)
    return args


def build_pin_remove_args(package_id: str) -> list[str]:
    """Build `winget pin remove` arguments."""
    return ["pin", "remove", "--id", package_id]
