"""Shared constants for plugcli."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "CORE_PLUGIN",
    "DEFAULT_API_HOST",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT",
    "ROOT_NAMESPACE",
    "VERSION",
]

VERSION = "0.4.0"

# Config file path - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "plugcli" / "config.toml"

# Name of the global configuration section
CONFIG_SECTION = "plugcli"

# Fixed name of the root namespace
ROOT_NAMESPACE = "plugcli"

# Built-in root plugin, always loaded first
CORE_PLUGIN = "core"

DEFAULT_API_HOST = "https://api.plugcli.dev"
DEFAULT_PAGE_SIZE = 25

# HTTP timeout (seconds)
DEFAULT_TIMEOUT = 30.0
