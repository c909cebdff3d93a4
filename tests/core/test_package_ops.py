"""Tests for direct package commands that write back to the manifest."""

from pathlib import Path

import pytest

from gistsync.core.context import GistSyncContext
from gistsync.core.inventory.fake import FakePackageInventory
from gistsync.core.manifest import ManifestUnavailableError
from gistsync.core.manifest_store.fake import FakeManifestStore
from gistsync.core.package_ops import (
    export_packages,
    import_packages,
    install_and_save,
    pin_add_and_save,
    pin_remove_and_save,
    uninstall_and_save,
    upgrade_and_save,
)
from gistsync.core.packages import (
    InstallOptions,
    LocalPackage,
    PackageDefinition,
    PinRecord,
    UninstallOptions,
    UpgradeOptions,
)
from gistsync.core.winget.fake import FakeWinGet


def _context(
    packages: list[PackageDefinition] | None = None,
    inventory: FakePackageInventory | None = None,
    exit_codes: dict[tuple[str, str], int] | None = None,
) -> tuple[GistSyncContext, FakeWinGet, FakeManifestStore]:
    inventory = inventory if inventory is not None else FakePackageInventory()
    winget = FakeWinGet(inventory=inventory, exit_codes=exit_codes)
    store = FakeManifestStore(packages=packages)
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)
    return ctx, winget, store


def test_install_adds_entry_with_options() -> None:
    ctx, winget, store = _context(packages=[PackageDefinition(id="Other.App")])

    exit_code = install_and_save(ctx, InstallOptions(id="Git.Git", silent=True, scope="user"))

    assert exit_code == 0
    assert winget.calls == [["install", "--id", "Git.Git", "--silent", "--scope", "user"]]
    assert store.packages == [
        PackageDefinition(id="Git.Git", silent=True, scope="user"),
        PackageDefinition(id="Other.App"),
    ]


def test_install_of_pinned_entry_installs_pinned_version_and_repins() -> None:
    existing = PackageDefinition(id="Foo", pin="1.5", pin_type="blocking", version="1.5")
    ctx, winget, store = _context(packages=[existing])

    install_and_save(ctx, InstallOptions(id="foo"))

    assert winget.calls == [
        ["install", "--id", "foo", "--version", "1.5"],
        ["pin", "add", "--id", "foo", "--version", "1.5", "--blocking"],
    ]
    assert store.packages == [
        PackageDefinition(id="foo", version="1.5", pin="1.5", pin_type="blocking")
    ]


def test_install_explicit_version_moves_existing_pin() -> None:
    ctx, winget, store = _context(packages=[PackageDefinition(id="Foo", pin="1.5")])

    install_and_save(ctx, InstallOptions(id="Foo", version="2.0"))

    assert winget.operations == [("install", "Foo"), ("pin add", "Foo")]
    assert store.packages[0].pin == "2.0"


def test_install_explicit_version_without_pin_is_not_recorded() -> None:
    ctx, _, store = _context()

    install_and_save(ctx, InstallOptions(id="Foo", version="2.0"))

    assert store.packages == [PackageDefinition(id="Foo")]


def test_install_clears_tombstone() -> None:
    ctx, _, store = _context(packages=[PackageDefinition(id="Foo", uninstall=True)])

    install_and_save(ctx, InstallOptions(id="Foo"))

    assert store.packages == [PackageDefinition(id="Foo")]


def test_install_failure_leaves_manifest_untouched() -> None:
    ctx, _, store = _context(exit_codes={("install", "Foo"): 1603})

    exit_code = install_and_save(ctx, InstallOptions(id="Foo"))

    assert exit_code == 1603
    assert store.saved == []


def test_uninstall_writes_tombstone_and_removes_pin() -> None:
    existing = PackageDefinition(id="Foo", pin="1.0", pin_type="gating", version="1.0", silent=True)
    inventory = FakePackageInventory(
        packages=[LocalPackage(id="Foo", name="Foo", version="1.0")],
        pins=[PinRecord(id="Foo", pin_type="Gating", pinned_version="1.0")],
    )
    ctx, winget, store = _context(packages=[existing], inventory=inventory)

    exit_code = uninstall_and_save(ctx, UninstallOptions(id="Foo"))

    assert exit_code == 0
    assert winget.operations == [("uninstall", "Foo"), ("pin remove", "Foo")]
    assert store.packages == [PackageDefinition(id="Foo", uninstall=True, silent=True)]
    assert inventory.installed_package("Foo") is None


def test_uninstall_failure_returns_code() -> None:
    ctx, winget, store = _context(exit_codes={("uninstall", "Foo"): 2})

    assert uninstall_and_save(ctx, UninstallOptions(id="Foo")) == 2
    assert winget.operations == [("uninstall", "Foo")]
    assert store.saved == []


def test_upgrade_of_unpinned_entry_leaves_manifest_alone() -> None:
    ctx, winget, store = _context(packages=[PackageDefinition(id="Foo")])

    assert upgrade_and_save(ctx, UpgradeOptions(id="Foo")) == 0
    assert winget.operations == [("upgrade", "Foo")]
    assert store.saved == []


def test_upgrade_of_pinned_entry_moves_pin_to_installed_version() -> None:
    inventory = FakePackageInventory(
        packages=[LocalPackage(id="Foo", name="Foo", version="1.0", available_version="2.0")]
    )
    ctx, winget, store = _context(
        packages=[PackageDefinition(id="Foo", pin="1.0", pin_type="blocking")],
        inventory=inventory,
    )

    upgrade_and_save(ctx, UpgradeOptions(id="Foo"))

    assert winget.calls[-1] == [
        "pin",
        "add",
        "--id",
        "Foo",
        "--version",
        "2.0",
        "--force",
        "--blocking",
    ]
    assert store.packages == [
        PackageDefinition(id="Foo", version="2.0", pin="2.0", pin_type="blocking")
    ]


def test_upgrade_of_unknown_package_adds_entry_with_options() -> None:
    ctx, _, store = _context()

    upgrade_and_save(ctx, UpgradeOptions(id="Foo", scope="machine", force=True))

    assert store.packages == [PackageDefinition(id="Foo", scope="machine", force=True)]


def test_upgrade_failure_does_not_read_manifest() -> None:
    store = FakeManifestStore(read_error=ManifestUnavailableError("should not be read"))
    inventory = FakePackageInventory()
    winget = FakeWinGet(inventory=inventory, exit_codes={("upgrade", "Foo"): 1})
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    assert upgrade_and_save(ctx, UpgradeOptions(id="Foo")) == 1


def test_pin_add_keeps_existing_pin_type() -> None:
    ctx, winget, store = _context(packages=[PackageDefinition(id="Foo", pin_type="gating")])

    assert pin_add_and_save(ctx, "Foo", "3.0") == 0

    assert winget.calls == [["pin", "add", "--id", "Foo", "--version", "3.0", "--gating"]]
    assert store.packages == [
        PackageDefinition(id="Foo", version="3.0", pin="3.0", pin_type="gating")
    ]


def test_pin_add_failure_does_not_save() -> None:
    ctx, _, store = _context(exit_codes={("pin add", "Foo"): 1})

    assert pin_add_and_save(ctx, "Foo", "3.0", "blocking", force=True) == 1
    assert store.saved == []


def test_pin_remove_clears_pin_fields() -> None:
    ctx, winget, store = _context(
        packages=[PackageDefinition(id="Foo", pin="3.0", pin_type="gating", version="3.0")]
    )

    assert pin_remove_and_save(ctx, "Foo") == 0

    assert winget.operations == [("pin remove", "Foo")]
    assert store.packages == [PackageDefinition(id="Foo")]


def test_export_lists_installed_ids(tmp_path: Path) -> None:
    inventory = FakePackageInventory(
        packages=[
            LocalPackage(id="Zeta.App", name="Zeta", version="1.0"),
            LocalPackage(id="Alpha.App", name="Alpha", version="2.0"),
        ]
    )
    ctx, _, _ = _context(inventory=inventory)
    output = tmp_path / "export.yaml"

    document = export_packages(ctx, output)

    assert document == "Alpha.App:\nZeta.App:\n"
    assert output.read_text(encoding="utf-8") == document


def test_import_replaces_manifest(tmp_path: Path) -> None:
    source = tmp_path / "packages.yaml"
    source.write_text("Foo:\n  pin: '1.0'\nBar:\n", encoding="utf-8")
    ctx, _, store = _context(packages=[PackageDefinition(id="Old")])

    assert import_packages(ctx, source) == 2
    assert store.packages == [PackageDefinition(id="Bar"), PackageDefinition(id="Foo", pin="1.0")]


def test_import_missing_file(tmp_path: Path) -> None:
    ctx, _, _ = _context()

    with pytest.raises(ManifestUnavailableError):
        import_packages(ctx, tmp_path / "nope.yaml")
