import click
from rich.console import Console
from rich.table import Table

from gistsync.cli.ensure import Ensure
from gistsync.cli.output import user_output
from gistsync.core.context import GistSyncContext
from gistsync.core.package_ops import pin_add_and_save, pin_remove_and_save
from gistsync.core.packages import normalize_id


@click.group("pin")
def pin_group() -> None:
    """Manage package pins and record them in the manifest."""


@pin_group.command("add")
@click.argument("package_id", metavar="ID")
@click.option("--version", "version", required=True, help="Version to pin to.")
@click.option(
    "--pin-type",
    type=click.Choice(["blocking", "gating"], case_sensitive=False),
    default=None,
    help="Pin enforcement; defaults to the manifest's pin type.",
)
@click.option("--force", is_flag=True, help="Replace an existing pin.")
@click.pass_obj
def pin_add(
    ctx: GistSyncContext, package_id: str, version: str, pin_type: str | None, force: bool
) -> None:
    """Pin a package to a version."""
    with Ensure.command_errors():
        exit_code = pin_add_and_save(ctx, package_id, version, pin_type, force=force)
    if exit_code != 0:
        raise SystemExit(1)


@pin_group.command("remove")
@click.argument("package_id", metavar="ID")
@click.pass_obj
def pin_remove(ctx: GistSyncContext, package_id: str) -> None:
    """Remove the pin of a package."""
    with Ensure.command_errors():
        exit_code = pin_remove_and_save(ctx, package_id)
    if exit_code != 0:
        raise SystemExit(1)


@pin_group.command("list")
@click.pass_obj
def pin_list(ctx: GistSyncContext) -> None:
    """List pins on this machine next to the pins in the manifest."""
    with Ensure.command_errors():
        local_pins = ctx.inventory.list_pins()
        packages = ctx.manifest_store.get_packages()

    manifest_pins = {normalize_id(p.id): p for p in packages if p.pin}
    local_by_id = {normalize_id(p.id): p for p in local_pins}
    if not manifest_pins and not local_by_id:
        user_output("No pins found")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("package", style="cyan", no_wrap=True)
    table.add_column("local", no_wrap=True)
    table.add_column("manifest", no_wrap=True)
    table.add_column("type", no_wrap=True)

    for key in sorted(manifest_pins.keys() | local_by_id.keys()):
        local = local_by_id.get(key)
        wanted = manifest_pins.get(key)
        package_id = wanted.id if wanted is not None else local_by_id[key].id
        local_version = (local.pinned_version or "-") if local is not None else "-"
        wanted_version = wanted.pin if wanted is not None else "-"
        if wanted is not None and wanted.pin_type:
            pin_type = wanted.pin_type
        elif local is not None:
            pin_type = local.pin_type
        else:
            pin_type = ""
        table.add_row(package_id, local_version, wanted_version, pin_type)

    console = Console(stderr=True)
    console.print(table)
