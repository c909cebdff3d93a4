"""Export installed packages and import a manifest file."""

from pathlib import Path

import click

from gistsync.cli.ensure import Ensure
from gistsync.cli.output import machine_output
from gistsync.core.context import GistSyncContext
from gistsync.core.package_ops import export_packages, import_packages


@click.command("export")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the manifest to this file instead of stdout.",
)
@click.pass_obj
def export_cmd(ctx: GistSyncContext, output_path: Path | None) -> None:
    """Write every installed package as a manifest document."""
    with Ensure.command_errors():
        document = export_packages(ctx, output_path)
    if output_path is None:
        machine_output(document, nl=False)


@click.command("import")
@click.argument("file_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def import_cmd(ctx: GistSyncContext, file_path: Path) -> None:
    """Replace the Gist manifest with the contents of FILE_PATH."""
    with Ensure.command_errors():
        import_packages(ctx, file_path)
