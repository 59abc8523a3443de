"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of ClientConfig to/from TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from fantomas_client.domain.config import ClientConfig

# Per-project override file, looked up in the folder of the formatted file
LOCAL_CONFIG_NAME = ".fantomas-client.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/fantomas-client/config.toml or ~/.config/fantomas-client/config.toml
    - Windows: %APPDATA%/fantomas-client/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "fantomas-client" / "config.toml"
        return Path.home() / ".config" / "fantomas-client" / "config.toml"
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "fantomas-client" / "config.toml"
    return Path.home() / ".config" / "fantomas-client" / "config.toml"


def get_local_config_path(folder: Path) -> Path:
    """Get the path of the project override file for a folder."""
    return folder / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: ClientConfig) -> dict[str, Any]:
    """Convert a ClientConfig to TOML-serializable data.

    TOML has no null, so unset optional values are left out.
    """
    data = asdict(config)
    return {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in data.items()
    }


def save_config(config: ClientConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: Configuration to write
        path: Destination file; parent directories are created
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
