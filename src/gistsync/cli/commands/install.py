from typing import Any

import click

from gistsync.cli.commands.options import installer_options
from gistsync.cli.ensure import Ensure
from gistsync.core.context import GistSyncContext
from gistsync.core.package_ops import install_and_save, uninstall_and_save, upgrade_and_save
from gistsync.core.packages import InstallOptions, UninstallOptions, UpgradeOptions


@click.command("install")
@installer_options(header=True)
@click.pass_obj
def install_cmd(ctx: GistSyncContext, package_id: str, **options: Any) -> None:
    """Install a package and add it to the manifest."""
    with Ensure.command_errors():
        exit_code = install_and_save(ctx, InstallOptions(id=package_id, **options))
    if exit_code != 0:
        raise SystemExit(1)


@click.command("uninstall")
@click.argument("package_id", metavar="ID")
@click.option("--scope", default=None, help="Scope the package was installed with.")
@click.option("--interactive", is_flag=True, help="Request interactive uninstall.")
@click.option("--silent", is_flag=True, help="Request silent uninstall.")
@click.option("--force", is_flag=True, help="Run the uninstall even if checks fail.")
@click.pass_obj
def uninstall_cmd(
    ctx: GistSyncContext,
    package_id: str,
    scope: str | None,
    interactive: bool,
    silent: bool,
    force: bool,
) -> None:
    """Uninstall a package and mark it `uninstall: true` in the manifest."""
    options = UninstallOptions(
        id=package_id, scope=scope, interactive=interactive, silent=silent, force=force
    )
    with Ensure.command_errors():
        exit_code = uninstall_and_save(ctx, options)
    if exit_code != 0:
        raise SystemExit(1)


@click.command("upgrade")
@installer_options(header=False)
@click.pass_obj
def upgrade_cmd(ctx: GistSyncContext, package_id: str, **options: Any) -> None:
    """Upgrade a package; a pinned package has its pin moved to the new version."""
    with Ensure.command_errors():
        exit_code = upgrade_and_save(ctx, UpgradeOptions(id=package_id, **options))
    if exit_code != 0:
        raise SystemExit(1)
