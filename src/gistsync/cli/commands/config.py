import click

from gistsync.cli.ensure import Ensure
from gistsync.cli.output import machine_output, user_output
from gistsync.core.context import GistSyncContext
from gistsync.core.global_config import CONFIG_KEYS, global_config_path, set_config_value


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return "" if value is None else str(value)


@click.group("config")
def config_group() -> None:
    """Manage gistsync configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: GistSyncContext) -> None:
    """Print all configuration keys and their values."""
    user_output(click.style(f"Global configuration ({global_config_path()}):", bold=True))
    for key in CONFIG_KEYS:
        machine_output(f"  {key}={_format_value(getattr(ctx.global_config, key))}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: GistSyncContext, key: str) -> None:
    """Print the value of a config key."""
    Ensure.invariant(key in CONFIG_KEYS, f"Invalid key: {key}")
    machine_output(_format_value(getattr(ctx.global_config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
def config_set(key: str, value: str) -> None:
    """Set a config key; an empty VALUE restores the default."""
    try:
        set_config_value(key, value)
    except ValueError as e:
        user_output(str(e))
        raise SystemExit(1) from e
    user_output(f"Set {key}={value}")
