"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.gistsync/config.toml.
Every key is optional; a missing file means all defaults.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit

DEFAULT_GIST_FILE_NAME = "gistsync.yaml"
DEFAULT_GIST_DESCRIPTION = "gistsync packages"

CONFIG_KEYS = (
    "gist_file_name",
    "gist_description",
    "gist_id",
    "winget_path",
    "refresh_inventory_before_pins",
)
_BOOL_KEYS = frozenset({"refresh_inventory_before_pins"})


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in GistSyncContext.
    """

    gist_file_name: str = DEFAULT_GIST_FILE_NAME
    gist_description: str = DEFAULT_GIST_DESCRIPTION
    gist_id: str | None = None
    winget_path: str | None = None
    refresh_inventory_before_pins: bool = True


def global_config_path() -> Path:
    """Get the path to the global config file."""
    return Path.home() / ".gistsync" / "config.toml"


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config from ~/.gistsync/config.toml.

    Args:
        path: Config file path (defaults to ~/.gistsync/config.toml)

    Returns:
        GlobalConfig with values from the file, defaults for missing keys

    Raises:
        ValueError: If the file is not valid TOML or a value has the wrong type
    """
    config_path = path if path is not None else global_config_path()
    if not config_path.exists():
        return GlobalConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    refresh = data.get("refresh_inventory_before_pins", True)
    if not isinstance(refresh, bool):
        raise ValueError(
            f"'refresh_inventory_before_pins' in {config_path} must be true or false"
        )

    return GlobalConfig(
        gist_file_name=str(data.get("gist_file_name") or DEFAULT_GIST_FILE_NAME),
        gist_description=str(data.get("gist_description") or DEFAULT_GIST_DESCRIPTION),
        gist_id=str(data["gist_id"]) if data.get("gist_id") else None,
        winget_path=str(data["winget_path"]) if data.get("winget_path") else None,
        refresh_inventory_before_pins=refresh,
    )


def parse_config_value(key: str, value: str) -> str | bool:
    """Convert a command-line value to the type stored for key.

    Raises:
        ValueError: If key is unknown or a boolean value is not true/false
    """
    if key not in CONFIG_KEYS:
        raise ValueError(f"Invalid config key: {key}")
    if key in _BOOL_KEYS:
        if value.lower() not in ("true", "false"):
            raise ValueError(f"Invalid boolean value for {key}: {value}")
        return value.lower() == "true"
    return value


def set_config_value(key: str, value: str, path: Path | None = None) -> None:
    """Set one key in the config file, preserving comments and other keys.

    An empty value removes the key so that its default applies again.
    """
    typed_value = parse_config_value(key, value)
    config_path = path if path is not None else global_config_path()

    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        doc = tomlkit.document()
        doc.add(tomlkit.comment("Global gistsync configuration"))

    if typed_value == "":
        doc.pop(key, None)
    else:
        doc[key] = typed_value

    with config_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
