"""Installer options shared by the install and upgrade commands."""

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])

_STRING_OPTIONS = (
    ("--scope", "Install scope (user or machine)."),
    ("--architecture", "Architecture to install."),
    ("--location", "Location to install to."),
    ("--locale", "Locale to use (BCP47 format)."),
    ("--installer-type", "Installer type to select."),
    ("--custom", "Arguments passed to the installer in addition to the defaults."),
    ("--override", "Arguments passed to the installer instead of the defaults."),
    ("--log", "Log location."),
)

_FLAG_OPTIONS = (
    ("--force", "Override the installer hash check and other safeguards."),
    ("--skip-dependencies", "Skip processing package dependencies."),
    ("--allow-hash-mismatch", "Ignore the installer hash check failure."),
    ("--accept-package-agreements", "Accept all license agreements for packages."),
    ("--accept-source-agreements", "Accept all source agreements during source operations."),
    ("--interactive", "Request interactive installation."),
    ("--silent", "Request silent installation."),
)


def installer_options(*, header: bool) -> Callable[[F], F]:
    """Add winget installer options to a command.

    header: whether the command accepts --header (upgrade does not).
    """

    def decorator(f: F) -> F:
        for name, help_text in reversed(_FLAG_OPTIONS):
            f = click.option(name, is_flag=True, default=False, help=help_text)(f)
        for name, help_text in reversed(_STRING_OPTIONS):
            f = click.option(name, default=None, help=help_text)(f)
        if header:
            f = click.option("--header", default=None, help="HTTP header for REST sources.")(f)
        f = click.option("--version", "version", default=None, help="Version to install.")(f)
        f = click.argument("package_id", metavar="ID")(f)
        return f

    return decorator
