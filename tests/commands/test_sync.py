"""CLI tests for the sync command.

The passes themselves are covered in tests/core/test_reconcile.py; this file
checks option handling, exit codes and rendering.
"""

from pathlib import Path

from click.testing import CliRunner

from gistsync.cli.cli import cli
from gistsync.core.context import GistSyncContext
from gistsync.core.inventory.fake import FakePackageInventory
from gistsync.core.manifest import ManifestUnavailableError
from gistsync.core.manifest_store.fake import FakeManifestStore
from gistsync.core.packages import LocalPackage, PackageDefinition
from gistsync.core.winget.fake import FakeWinGet


def test_sync_installs_missing_packages() -> None:
    inventory = FakePackageInventory()
    winget = FakeWinGet(inventory=inventory)
    store = FakeManifestStore(packages=[PackageDefinition(id="Git.Git")])
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert winget.operations == [("install", "Git.Git")]
    assert "Sync complete" in result.output
    assert "1 installed" in result.output


def test_sync_exits_1_when_a_package_fails() -> None:
    inventory = FakePackageInventory()
    winget = FakeWinGet(inventory=inventory, exit_codes={("install", "Bad.App"): 1603})
    store = FakeManifestStore(
        packages=[PackageDefinition(id="Bad.App"), PackageDefinition(id="Good.App")]
    )
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync", "--verbose"], obj=ctx)

    assert result.exit_code == 1
    assert "Sync finished with errors" in result.output
    assert "1 installed" in result.output
    assert "1 failed" in result.output
    assert inventory.installed_package("Good.App") is not None


def test_sync_reads_local_file(tmp_path: Path) -> None:
    manifest = tmp_path / "packages.yaml"
    manifest.write_text("Foo.Bar:\n  uninstall: true\n", encoding="utf-8")
    inventory = FakePackageInventory(
        packages=[LocalPackage(id="Foo.Bar", name="Foo", version="1.0")]
    )
    winget = FakeWinGet(inventory=inventory)
    store = FakeManifestStore(read_error=ManifestUnavailableError("gist must not be read"))
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync", "--file", str(manifest)], obj=ctx)

    assert result.exit_code == 0, result.output
    assert winget.operations == [("uninstall", "Foo.Bar")]


def test_sync_reads_url() -> None:
    inventory = FakePackageInventory()
    winget = FakeWinGet(inventory=inventory)
    store = FakeManifestStore(
        urls={"https://example.com/p.yaml": [PackageDefinition(id="Foo.Bar", pin="2.0")]}
    )
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync", "--url", "https://example.com/p.yaml"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert winget.operations == [("install", "Foo.Bar"), ("pin add", "Foo.Bar")]


def test_sync_dry_run_does_not_touch_winget() -> None:
    inventory = FakePackageInventory()
    winget = FakeWinGet(inventory=inventory)
    store = FakeManifestStore(packages=[PackageDefinition(id="Git.Git")])
    ctx = GistSyncContext.for_test(winget=winget, inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync", "--dry-run"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert winget.calls == []
    assert "Would run: winget install --id Git.Git" in result.output


def test_sync_manifest_error_exits_1() -> None:
    store = FakeManifestStore(read_error=ManifestUnavailableError("gh: not logged in"))
    ctx = GistSyncContext.for_test(manifest_store=store)

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: gh: not logged in" in result.output


def test_sync_missing_file_exits_1(tmp_path: Path) -> None:
    ctx = GistSyncContext.for_test()

    result = CliRunner().invoke(cli, ["sync", "--file", str(tmp_path / "nope.yaml")], obj=ctx)

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_sync_with_nothing_to_do() -> None:
    inventory = FakePackageInventory(
        packages=[LocalPackage(id="Git.Git", name="Git", version="2.0")]
    )
    store = FakeManifestStore(packages=[PackageDefinition(id="git.git")])
    ctx = GistSyncContext.for_test(inventory=inventory, manifest_store=store)

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "0 installed, 0 uninstalled, 0 pinned, 0 unpinned, 0 failed" in result.output
