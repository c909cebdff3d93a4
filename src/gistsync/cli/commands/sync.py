from pathlib import Path

import click

from gistsync.cli.ensure import Ensure
from gistsync.cli.rendering import render_sync_result
from gistsync.core.context import GistSyncContext
from gistsync.core.reconcile import ManifestSource


@click.command("sync")
@click.option("--url", default=None, help="Read the manifest from this URL instead of the Gist.")
@click.option(
    "--file",
    "file_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read the manifest from a local YAML file instead of the Gist.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    # dry_run=False: Apply changes by default
    default=False,
    help="Show what would be done without installing, uninstalling or pinning anything.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show skipped pins and failure details.")
@click.pass_obj
def sync_cmd(
    ctx: GistSyncContext,
    url: str | None,
    file_path: Path | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Install, uninstall and pin packages to match the manifest.

    Packages marked `uninstall: true` are removed first, missing packages are
    installed next, and pins are brought in line last. A failure of one
    package does not stop the others.
    """
    if dry_run:
        ctx = ctx.as_dry_run()

    with Ensure.command_errors():
        result = ctx.engine().sync(ManifestSource(file_path=file_path, url=url))

    render_sync_result(result, verbose=verbose)
    if not result.success:
        raise SystemExit(1)
