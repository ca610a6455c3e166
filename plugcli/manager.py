"""PlugCli manager: configuration, plugins, hooks and the command tree."""

from __future__ import annotations

import importlib
import os
import sys
from collections.abc import Sequence
from typing import Any

from .commands.namespace import RootNamespace
from .config import Configuration
from .config_loader import ConfigLoader
from .constants import CONFIG_SECTION, CORE_PLUGIN
from .hooks import EnvironmentHookArgs, HookEngine, HookName
from .httpclient import APIClient
from .logging_setup import get_logger
from .models import ConfigError, PluginLoadError
from .plugins.core.schema import PLUGCLI_CONFIG_SCHEMA
from .plugins.interface import Plugin, RootPlugin
from .validation import ConfigValidator

__all__: list[str] = ["PlugCli"]


class PlugCli:  # pylint: disable=too-many-instance-attributes
    """Main app object, passed to commands and hook listeners as `env`."""

    config: dict[str, Any]
    settings: Configuration
    " the `[plugcli]` section "

    def __init__(self) -> None:
        self.log = get_logger()
        self.config = {}
        self.settings = Configuration({}, logger=self.log, schema=PLUGCLI_CONFIG_SCHEMA)
        self.plugins: dict[str, Plugin] = {}
        self.hooks = HookEngine()
        self.namespace = RootNamespace()
        self.root_plugin: RootPlugin | None = None
        self._config_loader = ConfigLoader(self.log)
        self._client: APIClient | None = None

    async def initialize(self, config_filename: str = "") -> None:
        """Load the configuration and the plugins, then fire `plugins:init`.

        Raises:
            ConfigError: if the configuration can't be read or is invalid
            PluginLoadError: if a plugin fails to load
        """
        await self.load_config(config_filename)
        await self.load_plugins()
        await self.hooks.fire(HookName.PLUGINS_INIT, EnvironmentHookArgs(self))

    async def load_config(self, config_filename: str = "") -> None:
        """Read the configuration and validate the `[plugcli]` section."""
        self.config = await self._config_loader.load(config_filename)
        section = self.config.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            msg = f"[{CONFIG_SECTION}] must be a table"
            raise ConfigError(msg)

        self.settings = Configuration(section, logger=self.log, schema=PLUGCLI_CONFIG_SCHEMA)
        validator = ConfigValidator(self.settings, CONFIG_SECTION, self.log)
        errors = validator.validate(PLUGCLI_CONFIG_SCHEMA)
        validator.warn_unknown_keys(PLUGCLI_CONFIG_SCHEMA)
        for error in errors:
            self.log.error(error)
        if errors:
            msg = f"[{CONFIG_SECTION}] has {len(errors)} error(s)"
            raise ConfigError(msg)

    async def load_plugins(self) -> None:
        """Load the core plugin, then the plugins listed in the configuration."""
        for path in self.settings.get_list("plugins_paths"):
            path = os.path.expanduser(os.path.expandvars(str(path)))  # noqa: PLW2901
            if path not in sys.path:
                sys.path.append(path)

        for name in [CORE_PLUGIN, *self.settings.get_list("plugins")]:
            if plugin_name(name) in self.plugins:
                self.log.warning("Plugin %s is listed twice", name)
                continue
            await self.load_plugin(name)

    async def load_plugin(self, name: str) -> Plugin:
        """Import, configure and initialize a single plugin.

        Args:
            name: A module path, or the name of a module under `plugcli.plugins`

        Raises:
            PluginLoadError: if the plugin can't be loaded
        """
        modname = name if "." in name else f"plugcli.plugins.{name}"
        short_name = plugin_name(name)
        try:
            plug: Plugin = importlib.import_module(modname).Extension(short_name)
        except ModuleNotFoundError as e:
            self.log.exception("Unable to locate plugin called '%s'", name)
            raise PluginLoadError(name, f"module {modname} not found") from e
        except Exception as e:
            self.log.exception("Error loading plugin %s:", name)
            raise PluginLoadError(name, str(e)) from e

        if short_name in self.plugins:
            raise PluginLoadError(name, "already loaded")
        plug.env = self
        try:
            await plug.load_config(self.config)
            for error in plug.validate_config():
                self.log.error(error)
            await plug.init()
            if isinstance(plug, RootPlugin):
                self._set_root_plugin(plug)
            plug.register_hooks(self.hooks)
        except PluginLoadError:
            self.hooks.delete_source(short_name)
            raise
        except Exception as e:
            self.hooks.delete_source(short_name)
            self.log.exception("Error initializing plugin %s:", name)
            raise PluginLoadError(name, str(e)) from e

        self.plugins[short_name] = plug
        plug.log.info("loaded")
        return plug

    def _set_root_plugin(self, plugin: RootPlugin) -> None:
        """Graft the namespace of the (single) root plugin."""
        if self.root_plugin is not None:
            msg = f"{self.root_plugin.name} is already the root plugin"
            raise PluginLoadError(plugin.name, msg)
        try:
            self.namespace.graft(plugin.namespace)
        except ValueError as e:
            raise PluginLoadError(plugin.name, str(e)) from e
        self.root_plugin = plugin

    async def unload_plugin(self, name: str) -> None:
        """Stop a plugin and remove its hook listeners.

        Raises:
            KeyError: if the plugin isn't loaded
            ValueError: for the root plugin, whose commands can't be removed
        """
        plugin = self.plugins[name]
        if plugin is self.root_plugin:
            msg = f"Can't unload the root plugin {name}"
            raise ValueError(msg)
        self.log.info("Unloading plugin %s", name)
        await plugin.exit()
        self.hooks.delete_source(name)
        del self.plugins[name]

    @property
    def client(self) -> APIClient:
        """The API client, configured from the `[plugcli]` section."""
        if self._client is None:
            self._client = APIClient(
                self.settings.get_str("api_host"),
                token=self.settings.get_str("api_token") or None,
                timeout=self.settings.get_float("timeout"),
                log=get_logger("api"),
            )
        return self._client

    async def run_command(self, argv: Sequence[str]) -> int:
        """Run the command designated by `argv`, returns its exit code."""
        return await self.namespace.run_command(self, argv)

    async def exit_plugins(self) -> None:
        """Stop every plugin and close the API client."""
        for name, plugin in list(self.plugins.items()):
            try:
                await plugin.exit()
            except Exception:  # pylint: disable=broad-exception-caught
                self.log.exception("Error stopping plugin %s", name)
        if self._client is not None:
            await self._client.close()


def plugin_name(name: str) -> str:
    """Return the plugin name for a configured entry (the last module path component)."""
    return name.rsplit(".", 1)[-1]
