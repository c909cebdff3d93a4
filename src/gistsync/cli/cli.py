import logging
import os

import click

from gistsync.cli.commands.config import config_group
from gistsync.cli.commands.install import install_cmd, uninstall_cmd, upgrade_cmd
from gistsync.cli.commands.pin import pin_group
from gistsync.cli.commands.sync import sync_cmd
from gistsync.cli.commands.transfer import export_cmd, import_cmd
from gistsync.cli.ensure import Ensure
from gistsync.cli.output import user_output
from gistsync.core.context import create_context
from gistsync.core.global_config import GlobalConfig, load_global_config

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

LOG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def _load_config_or_defaults() -> GlobalConfig:
    """Load the config file, falling back to defaults when it is invalid.

    Used for the config commands so that `config set` can still fix a bad value.
    """
    try:
        return load_global_config()
    except ValueError as e:
        user_output(click.style("Warning: ", fg="yellow") + f"{e}; using defaults")
        return GlobalConfig()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="gistsync")
@click.option("--debug", is_flag=True, help="Log debug output (same as GISTSYNC_DEBUG=1).")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.pass_context
def cli(ctx: click.Context, debug: bool, quiet: bool) -> None:
    """Keep winget packages in sync with a manifest stored in a GitHub Gist."""
    if debug or os.getenv("GISTSYNC_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        if ctx.invoked_subcommand == "config":
            global_config = _load_config_or_defaults()
        else:
            with Ensure.command_errors():
                global_config = load_global_config()
        ctx.obj = create_context(dry_run=False, quiet=quiet, global_config=global_config)


# Register all commands
cli.add_command(sync_cmd)
cli.add_command(install_cmd)
cli.add_command(uninstall_cmd)
cli.add_command(upgrade_cmd)
cli.add_command(pin_group)
cli.add_command(export_cmd)
cli.add_command(import_cmd)
cli.add_command(config_group)


def main() -> None:
    """CLI entry point used by the `gistsync` console script."""
    cli()
