"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of ProtostreamConfig to/from
TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from protostream.domain.config import ProtostreamConfig

LOCAL_CONFIG_NAME = "protostream.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/protostream/config.toml or
      ~/.config/protostream/config.toml
    - Windows: %APPDATA%/protostream/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "protostream" / "config.toml"
        return Path.home() / ".config" / "protostream" / "config.toml"
    else:
        # Unix-like: respect XDG_CONFIG_HOME
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "protostream" / "config.toml"
        return Path.home() / ".config" / "protostream" / "config.toml"


def get_local_config_path(cwd: Path | None = None) -> Path:
    """Get the path of the local config file in the working directory."""
    return (cwd or Path.cwd()) / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Relative protocol roots are resolved against the directory holding the
    config file, so a config can ship next to the directories it exposes.

    Args:
        path: Path to the config file

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
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e

    return _absolutize_roots(data, path.parent.resolve())


def _absolutize_roots(data: dict[str, Any], base: Path) -> dict[str, Any]:
    protocols = data.get("protocols")
    if not isinstance(protocols, dict):
        return data

    for name, protocol in protocols.items():
        if not isinstance(protocol, dict):
            continue
        roots = protocol.get("roots")
        if isinstance(roots, str):
            raise ValueError(f"Protocol '{name}': roots must be a list of paths")
        if isinstance(roots, list):
            # Non-string entries are left for ProtocolConfig to reject
            protocol["roots"] = [
                _absolutize(root, base) if isinstance(root, str) else root
                for root in roots
            ]
    return data


def _absolutize(root: str, base: Path) -> str:
    return root if Path(root).is_absolute() else os.path.normpath(base / root)


def load_config(path: Path) -> ProtostreamConfig:
    """Load configuration from a single TOML file over built-in defaults.

    Args:
        path: Path to the config file

    Returns:
        Parsed ProtostreamConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    data = load_config_data(path)
    return ProtostreamConfig.from_partial(ProtostreamConfig.default(), data)


def config_to_data(config: ProtostreamConfig) -> dict[str, Any]:
    """Convert a config into the TOML data layout."""
    return {
        "logging": {"level": config.logging.level},
        "protocols": {
            name: {
                "roots": list(protocol.roots),
                "writable": protocol.writable,
            }
            for name, protocol in sorted(config.protocols.items())
        },
    }


def save_config(config: ProtostreamConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: ProtostreamConfig to save
        path: Destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)


def create_default_config_file(path: Path, root: Path | None = None) -> None:
    """Create a starter config file with comments.

    Args:
        path: Destination path for the config file
        root: Directory exposed by the example protocols (default: ./data
            next to the config file)
    """
    root_value = str(root) if root is not None else "data"
    # TOML basic strings need backslashes escaped (Windows paths)
    root_value = root_value.replace("\\", "\\\\")

    # We use a template string to preserve comments and formatting
    template = f"""\
# protostream configuration
# Created by: protostream config init

[logging]
# Log level: DEBUG, INFO, WARNING, ERROR or CRITICAL
level = "WARNING"

# Each [protocols.<name>] table registers <name>:// addresses.
# roots: directories the protocol is confined to, tried in order.
#        Relative roots are resolved against this file's directory.
# writable: allow mkdir/rmdir/touch/rm/write/mv (default: false)

[protocols.data]
roots = ["{root_value}"]
writable = true

[protocols.data-read]
roots = ["{root_value}"]
writable = false
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        f.write(template)
