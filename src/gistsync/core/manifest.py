"""YAML serialization of the package manifest.

The manifest is a mapping keyed by package id:

    Git.Git:
    Microsoft.PowerToys:
      pin: 0.85.1
      pinType: blocking
    Mozilla.Firefox:
      uninstall: true

Entries are written sorted by id (case-insensitive) and only non-default
fields are emitted, so an entry with nothing but an id is written as an empty
value. Unknown fields are ignored on read.
"""

from dataclasses import fields
from typing import Any

import yaml

from gistsync.core.packages import PackageDefinition, normalize_id


class ManifestUnavailableError(RuntimeError):
    """The manifest could not be obtained (auth, missing file, network, ambiguous Gist)."""


class ManifestParseError(ValueError):
    """The manifest document exists but is not a valid package manifest."""


# Python field name -> manifest key
FIELD_ALIASES: dict[str, str] = {
    "version": "version",
    "pin": "pin",
    "pin_type": "pinType",
    "custom": "custom",
    "uninstall": "uninstall",
    "scope": "scope",
    "architecture": "architecture",
    "location": "location",
    "locale": "locale",
    "allow_hash_mismatch": "allowHashMismatch",
    "force": "force",
    "accept_package_agreements": "acceptPackageAgreements",
    "accept_source_agreements": "acceptSourceAgreements",
    "skip_dependencies": "skipDependencies",
    "header": "header",
    "installer_type": "installerType",
    "log": "log",
    "override": "override",
    "interactive": "interactive",
    "silent": "silent",
}

_BOOL_FIELDS = frozenset(
    f.name for f in fields(PackageDefinition) if f.name != "id" and f.type in (bool, "bool")
)

_NUMERIC_TAGS = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric-looking scalars as strings."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class _ManifestDumper(yaml.SafeDumper):
    """SafeDumper that writes empty entries as a bare key."""


def _represent_none(dumper: yaml.SafeDumper, _data: None) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:null", "")


_ManifestDumper.add_representer(type(None), _represent_none)


def sort_packages(packages: list[PackageDefinition]) -> list[PackageDefinition]:
    """Sort packages by id, ignoring case."""
    return sorted(packages, key=lambda p: normalize_id(p.id))


def parse_manifest(text: str | None) -> list[PackageDefinition]:
    """Parse a manifest document into package definitions.

    Args:
        text: YAML document. None or blank means "no packages".

    Returns:
        Package definitions sorted by id. When the document repeats a key
        (including keys that differ only by case), the last value wins.

    Raises:
        ManifestParseError: If the document is not valid YAML or not a
            mapping of package id to options.
    """
    if text is None or not text.strip():
        return []

    try:
        data = yaml.load(text, Loader=_ManifestLoader)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Invalid manifest YAML: {e}") from e

    if data is None:
        return []
    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Manifest must be a mapping of package id to options, got {type(data).__name__}"
        )

    by_key: dict[str, PackageDefinition] = {}
    for raw_id, entry in data.items():
        package = _parse_entry(raw_id, entry)
        by_key.pop(normalize_id(package.id), None)
        by_key[normalize_id(package.id)] = package

    return sort_packages(list(by_key.values()))


def _parse_entry(raw_id: Any, entry: Any) -> PackageDefinition:
    if raw_id is None or not str(raw_id).strip():
        raise ManifestParseError("Manifest contains an entry with an empty package id")
    package_id = str(raw_id).strip()

    if entry is None:
        return PackageDefinition(id=package_id)
    if not isinstance(entry, dict):
        raise ManifestParseError(
            f"Entry for '{package_id}' must be a mapping, got {type(entry).__name__}"
        )

    values: dict[str, Any] = {}
    for field_name, key in FIELD_ALIASES.items():
        if key not in entry or entry[key] is None:
            continue
        value = entry[key]
        if field_name in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise ManifestParseError(
                    f"Field '{key}' of '{package_id}' must be true or false, got {value!r}"
                )
            values[field_name] = value
        else:
            if isinstance(value, (dict, list)):
                raise ManifestParseError(
                    f"Field '{key}' of '{package_id}' must be a scalar, got {type(value).__name__}"
                )
            text_value = str(value)
            if text_value:
                values[field_name] = text_value

    return PackageDefinition(id=package_id, **values)


def _entry_to_dict(package: PackageDefinition) -> dict[str, Any] | None:
    entry: dict[str, Any] = {}
    for field_name, key in FIELD_ALIASES.items():
        value = getattr(package, field_name)
        if field_name in _BOOL_FIELDS:
            if value:
                entry[key] = True
        elif value:
            entry[key] = value
    return entry or None


def serialize_manifest(packages: list[PackageDefinition]) -> str:
    """Serialize package definitions to a manifest document.

    Duplicate ids (case-insensitive) collapse to the last definition. Output
    is sorted by id so that the document is stable across writes.
    """
    by_key: dict[str, PackageDefinition] = {}
    for package in packages:
        by_key.pop(normalize_id(package.id), None)
        by_key[normalize_id(package.id)] = package

    document = {p.id: _entry_to_dict(p) for p in sort_packages(list(by_key.values()))}
    if not document:
        return ""

    return yaml.dump(
        document,
        Dumper=_ManifestDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
