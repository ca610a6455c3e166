"""Core plugin: the built-in root plugin.

It provides the static command tree grafted under the root namespace and
reports the loaded plugins to the `info` command.
"""

from typing import TYPE_CHECKING

from ...commands.namespace import Namespace
from ...constants import VERSION
from ...hooks import HookName, InfoHookItem
from ..interface import RootPlugin
from .apps import AppsNamespace
from .commands import BuildCommand, HelpCommand, InfoCommand, PluginNamespace, ServeCommand, VersionCommand

if TYPE_CHECKING:
    from ...hooks import EnvironmentHookArgs, HookEngine


class Extension(RootPlugin):
    """Built-in plugin providing the core commands."""

    version = VERSION

    async def init(self) -> None:
        """Build the command tree."""
        self.namespace = Namespace(
            "core",
            "Pluggable command line client",
            namespaces={
                "apps": AppsNamespace,
                "plugin": PluginNamespace,
            },
            commands={
                "help": HelpCommand,
                "version": VersionCommand,
                "info": InfoCommand,
                "serve": ServeCommand,
                "build": BuildCommand,
            },
        )

    def register_hooks(self, hooks: "HookEngine") -> None:
        """Report the plugins on `info`."""
        hooks.register(self.name, HookName.INFO, self.on_info)

    def on_info(self, args: "EnvironmentHookArgs") -> list[InfoHookItem]:
        """List the loaded plugins except this one."""
        return [InfoHookItem("plugin", name, plugin.version) for name, plugin in args.env.plugins.items() if plugin is not self]
