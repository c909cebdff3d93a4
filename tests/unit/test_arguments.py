"""Tests for winget argument building."""

import pytest

from gistsync.core.arguments import (
    build_install_args,
    build_install_args_from_options,
    build_pin_add_args,
    build_pin_remove_args,
    build_uninstall_args,
    build_upgrade_args,
    pin_type_flag,
)
from gistsync.core.packages import (
    InstallOptions,
    PackageDefinition,
    UninstallOptions,
    UpgradeOptions,
)


def test_id_only_definition_produces_only_identity_flag() -> None:
    assert build_install_args(PackageDefinition(id="Git.Git")) == ["install", "--id", "Git.Git"]


def test_pin_overrides_version_on_install() -> None:
    package = PackageDefinition(id="Foo.Bar", version="1.0", pin="2.0")

    args = build_install_args(package)

    assert args == ["install", "--id", "Foo.Bar", "--version", "2.0"]


def test_version_used_when_no_pin() -> None:
    args = build_install_args(PackageDefinition(id="Foo.Bar", version="1.0"))

    assert args == ["install", "--id", "Foo.Bar", "--version", "1.0"]


def test_false_booleans_and_empty_strings_emit_nothing() -> None:
    package = PackageDefinition(
        id="Foo.Bar",
        scope="",
        architecture="",
        silent=False,
        force=False,
    )

    assert build_install_args(package) == ["install", "--id", "Foo.Bar"]


def test_all_install_flags_in_order() -> None:
    package = PackageDefinition(
        id="Foo.Bar",
        version="3.1",
        scope="machine",
        architecture="x64",
        location="C:\\Tools",
        locale="en-US",
        header="X-Token: abc",
        installer_type="msi",
        custom="/quiet",
        override="/S",
        log="C:\\log.txt",
        force=True,
        skip_dependencies=True,
        allow_hash_mismatch=True,
        accept_package_agreements=True,
        accept_source_agreements=True,
        interactive=True,
        silent=True,
    )

    args = build_install_args(package)

    assert args == [
        "install",
        "--id",
        "Foo.Bar",
        "--version",
        "3.1",
        "--silent",
        "--interactive",
        "--force",
        "--accept-package-agreements",
        "--accept-source-agreements",
        "--ignore-security-hash",
        "--skip-dependencies",
        "--scope",
        "machine",
        "--architecture",
        "x64",
        "--location",
        "C:\\Tools",
        "--log",
        "C:\\log.txt",
        "--header",
        "X-Token: abc",
        "--custom",
        "/quiet",
        "--override",
        "/S",
        "--installer-type",
        "msi",
        "--locale",
        "en-US",
    ]


def test_install_from_options_uses_explicit_version() -> None:
    options = InstallOptions(id="Foo.Bar", version="1.2.3", silent=True)

    assert build_install_args_from_options(options) == [
        "install",
        "--id",
        "Foo.Bar",
        "--version",
        "1.2.3",
        "--silent",
    ]


def test_upgrade_args() -> None:
    options = UpgradeOptions(id="Foo.Bar", accept_package_agreements=True, scope="user")

    assert build_upgrade_args(options) == [
        "upgrade",
        "--id",
        "Foo.Bar",
        "--accept-package-agreements",
        "--scope",
        "user",
    ]


def test_uninstall_args_only_carry_uninstall_options() -> None:
    options = UninstallOptions(id="Foo.Bar", scope="user", silent=True, force=True)

    assert build_uninstall_args(options) == [
        "uninstall",
        "--id",
        "Foo.Bar",
        "--silent",
        "--force",
        "--scope",
        "user",
    ]


@pytest.mark.parametrize(
    ("pin_type", "expected"),
    [
        ("gating", "--gating"),
        ("Blocking", "--blocking"),
        ("GATING", "--gating"),
        ("pinning", None),
        ("", None),
        (None, None),
    ],
)
def test_pin_type_flag(pin_type: str | None, expected: str | None) -> None:
    assert pin_type_flag(pin_type) == expected


def test_pin_add_args_with_force_and_type() -> None:
    args = build_pin_add_args("Foo.Bar", "2.0", "Blocking", force=True)

    assert args == ["pin", "add", "--id", "Foo.Bar", "--version", "2.0", "--force", "--blocking"]


def test_pin_add_args_unknown_type_adds_no_flag() -> None:
    assert build_pin_add_args("Foo.Bar", "2.0", "strict") == [
        "pin",
        "add",
        "--id",
        "Foo.Bar",
        "--version",
        "2.0",
    ]


def test_pin_remove_args() -> None:
    assert build_pin_remove_args("Foo.Bar") == ["pin", "remove", "--id", "Foo.Bar"]
