"""Configuration file loading utilities.

This module handles loading, parsing, and merging TOML configuration files.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

from .constants import CONFIG_FILE, CONFIG_SECTION
from .models import ConfigError
from .utils import merge

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader"]


class ConfigLoader:
    """Handles loading and merging configuration files.

    Supports:
    - TOML configuration files
    - Directory-based config (multiple .toml files merged)
    - Include directives for modular configuration
    """

    def __init__(self, log: logging.Logger) -> None:
        self.log = log
        self._config: dict[str, Any] = {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    async def load(self, config_filename: str = "") -> dict[str, Any]:
        """Load configuration from file or directory.

        Args:
            config_filename: Optional path to config file or directory.
                           If empty, uses the default CONFIG_FILE location,
                           which may be missing.

        Returns:
            The loaded and merged configuration dictionary.

        Raises:
            ConfigError: If an explicit config file is missing or has syntax errors.
        """
        if config_filename:
            config = await self._open_config(Path(os.path.expandvars(config_filename)).expanduser())
        elif await aiofiles.os.path.exists(CONFIG_FILE):
            config = await self._open_config(CONFIG_FILE)
        else:
            self.log.info("No configuration found at %s, using defaults", CONFIG_FILE)
            config = {}
        merge(self._config, config, replace=True)
        return self._config

    async def _open_config(self, fname: Path) -> dict[str, Any]:
        """Load config file(s) into a dictionary, processing includes."""
        if await aiofiles.os.path.isdir(fname):
            return await self._load_config_directory(fname)

        config = await self._load_config_file(fname)
        for extra_config in list(config.get(CONFIG_SECTION, {}).get("include", [])):
            merge(config, await self._open_config(Path(os.path.expandvars(extra_config)).expanduser()))
        return config

    async def _load_config_directory(self, directory: Path) -> dict[str, Any]:
        """Load and merge all .toml files from a directory."""
        config: dict[str, Any] = {}
        for toml_file in sorted(await aiofiles.os.listdir(directory)):
            if not toml_file.endswith(".toml"):
                continue
            merge(config, await self._load_config_file(directory / toml_file))
        return config

    async def _load_config_file(self, fname: Path) -> dict[str, Any]:
        """Load a single TOML configuration file.

        Raises:
            ConfigError: If file not found or has syntax errors
        """
        if not await aiofiles.os.path.exists(fname):
            self.log.critical("Config file not found! Please create %s", fname)
            msg = f"Config file not found: {fname}"
            raise ConfigError(msg)

        self.log.info("Loading %s", fname)
        async with aiofiles.open(fname, encoding="utf-8") as f:
            content = await f.read()
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            self.log.critical("Problem reading %s: %s", fname, e)
            msg = f"Invalid TOML in {fname}: {e}"
            raise ConfigError(msg) from e
