"""Rendering of sync results for the terminal."""

from rich.console import Console
from rich.table import Table

from gistsync.core.sync_result import SyncResult


def build_result_table(result: SyncResult, *, verbose: bool) -> Table:
    """Build a table with one row per package the run touched.

    With verbose, skipped pins and failed pin side effects are listed too.
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("package", style="cyan", no_wrap=True)
    table.add_column("action", no_wrap=True)
    table.add_column("result", no_wrap=True)
    table.add_column("detail")

    for package in result.uninstalled:
        table.add_row(package.id, "uninstall", "[green]ok[/green]", "")
    for package in result.installed:
        table.add_row(package.id, "install", "[green]ok[/green]", package.install_version or "")
    for package in result.pin_updated:
        table.add_row(package.id, "pin", "[green]ok[/green]", package.pin or "")
    for package in result.pin_removed:
        table.add_row(package.id, "unpin", "[green]ok[/green]", "")
    for package, code in result.failed.items():
        detail = result.failure_details.get(package.id, "") if verbose else ""
        table.add_row(package.id, "-", f"[red]failed ({code})[/red]", detail)

    if verbose:
        for outcome in result.pin_outcomes:
            if outcome.status == "applied":
                continue
            style = "yellow" if outcome.status == "failed" else "dim"
            table.add_row(
                outcome.package_id,
                f"pin {outcome.action}",
                f"[{style}]{outcome.status}[/{style}]",
                outcome.message or "",
            )
    return table


def render_sync_result(result: SyncResult, *, verbose: bool) -> None:
    """Print the result table and a one-line summary to stderr."""
    console = Console(stderr=True)
    table = build_result_table(result, verbose=verbose)
    if table.row_count:
        console.print(table)

    summary = (
        f"{len(result.installed)} installed, {len(result.uninstalled)} uninstalled, "
        f"{len(result.pin_updated)} pinned, {len(result.pin_removed)} unpinned, "
        f"{len(result.failed)} failed"
    )
    if result.cancelled:
        console.print(f"[yellow]Sync cancelled:[/yellow] {summary}", soft_wrap=True)
    elif result.success:
        console.print(f"[green]Sync complete:[/green] {summary}", soft_wrap=True)
    else:
        console.print(f"[red]Sync finished with errors:[/red] {summary}", soft_wrap=True)
