"""Commands of the core plugin."""

from __future__ import annotations

import json
import sys

from ...ansi import should_colorize
from ...commands.command import Command
from ...commands.help import get_command_help, get_namespace_help
from ...commands.models import CommandInput, CommandMetadata, CommandOption, NormalizedOptions
from ...commands.namespace import Namespace, split_colon_syntax
from ...commands.validators import contains
from ...constants import VERSION
from ...hooks import EnvironmentHookArgs, HookName, InfoHookItem
from ...models import CommandCategory, ExitCodeError, OptionType

__all__ = [
    "BuildCommand",
    "HelpCommand",
    "InfoCommand",
    "PluginListCommand",
    "PluginNamespace",
    "PluginUnloadCommand",
    "ServeCommand",
    "VersionCommand",
]


class HelpCommand(Command):
    """Show the help of a namespace or of a command."""

    metadata = CommandMetadata(
        name="help",
        description="Provides help for a certain command",
        example_commands=("apps", "plugin list", "plugin:list"),
        inputs=(CommandInput("command", "The command you desire help with"),),
    )

    async def validate(self, inputs: list[str]) -> None:
        """Any command path is accepted."""

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        colored = self.env.settings.get_bool("colored_output", True) and should_colorize(sys.stdout)
        _, _, target = await self.env.namespace.locate(split_colon_syntax(inputs))
        if isinstance(target, Namespace):
            print(await get_namespace_help(target, colored=colored))
        else:
            path = target.namespace.path() if target.namespace else []
            print(get_command_help(target.metadata, path))


class VersionCommand(Command):
    """Print the plugcli version."""

    metadata = CommandMetadata(name="version", description="Returns the current CLI version")

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        print(VERSION)


class InfoCommand(Command):
    """List versions of the CLI, of the plugins and of what they report."""

    metadata = CommandMetadata(
        name="info",
        description="Print system/environment info",
        options=(CommandOption("json", "Print the information in JSON", OptionType.BOOLEAN),),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        args = EnvironmentHookArgs(self.env)
        items = [InfoHookItem("cli", "plugcli", VERSION)]
        for result in await self.env.hooks.fire(HookName.INFO, args):
            items.extend(result or [])
        for project in await self.env.hooks.fire(HookName.PROJECT_INFO, args):
            if project:
                items.append(InfoHookItem("project", f"{project.name} ({project.id})", project.version))
                break

        if options["json"]:
            print(json.dumps([item.__dict__ for item in items], indent=2))
            return
        for kind in sorted({item.type for item in items}):
            print(f"{kind}:")
            for item in items:
                if item.type == kind:
                    path = f" ({item.path})" if item.path else ""
                    print(f"  {item.name:20s} {item.version}{path}")


class PluginListCommand(Command):
    """List the loaded plugins."""

    metadata = CommandMetadata(
        name="list",
        description="List the loaded plugins",
        options=(CommandOption("json", "Print the list in JSON", OptionType.BOOLEAN),),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        plugins = [{"name": name, "version": plugin.version} for name, plugin in self.env.plugins.items()]
        if options["json"]:
            print(json.dumps(plugins))
            return
        for plugin in plugins:
            print(f"{plugin['name']:20s} {plugin['version']}")


class PluginUnloadCommand(Command):
    """Unload a plugin: its hook listeners are removed."""

    metadata = CommandMetadata(
        name="unload",
        description="Unload a plugin",
        inputs=(CommandInput("name", "Name of the plugin", required=True),),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        name = inputs[0]
        if name not in self.env.plugins:
            msg = f"Plugin {name} isn't loaded"
            raise ExitCodeError(msg)
        try:
            await self.env.unload_plugin(name)
        except ValueError as e:
            raise ExitCodeError(str(e)) from e
        print(f"Plugin {name} unloaded")


class PluginNamespace(Namespace):
    """Plugin management commands."""

    name = "plugin"
    description = "Manage plugins"

    def __init__(self) -> None:
        super().__init__(
            commands={
                "list": PluginListCommand,
                "ls": "list",
                "unload": PluginUnloadCommand,
            }
        )


def _settings_summary(options: NormalizedOptions) -> str:
    return ", ".join(f"{k}={v}" for k, v in sorted(options.items()) if v not in (None, False, ""))


class ServeCommand(Command):
    """Start a local development server.

    Listeners of `watch:before` get the chance to prepare the project first.
    """

    metadata = CommandMetadata(
        name="serve",
        description="Start a local development server for app dev/testing",
        example_commands=("--lab --consolelogs -s", "-p 8200"),
        category=CommandCategory.WATCH,
        options=(
            CommandOption("consolelogs", "Print app console logs", OptionType.BOOLEAN, aliases=("c",)),
            CommandOption("serverlogs", "Print dev server logs", OptionType.BOOLEAN, aliases=("s",)),
            CommandOption("port", "Dev server HTTP port", default="8100", aliases=("p",)),
            CommandOption("livereload-port", "Live Reload port", default="35729", aliases=("r",)),
            CommandOption("nobrowser", "Disable launching a browser", OptionType.BOOLEAN, aliases=("b",)),
            CommandOption("nolivereload", "Do not start live reload", OptionType.BOOLEAN, aliases=("d",)),
            CommandOption("address", "Use specific address", default="0.0.0.0"),  # noqa: S104
            CommandOption("browser", "Specifies the browser to use (safari, firefox, chrome)", aliases=("w",)),
            CommandOption("lab", "Test your apps on multiple platform types in the browser", OptionType.BOOLEAN, aliases=("l",)),
            CommandOption("platform", "Start serve with a specific platform (ios/android)", aliases=("t",)),
        ),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        for port in ("port", "livereload-port"):
            if not str(options[port]).isdigit():
                msg = f"Invalid {port}: {options[port]}"
                raise ExitCodeError(msg)
        print(f"Serving on http://{options['address']}:{options['port']} ({_settings_summary(options)})")


class BuildCommand(Command):
    """Build the project for a platform.

    Listeners of `build:before` and `build:after` surround the build.
    """

    metadata = CommandMetadata(
        name="build",
        description="Build the project",
        long_description="Runs the build:before hooks, builds the project, then runs the build:after hooks.",
        example_commands=("", "android", "ios --prod"),
        category=CommandCategory.BUILD,
        inputs=(CommandInput("platform", "The platform to build for", validators=(contains(("android", "ios", "browser")),)),),
        options=(CommandOption("prod", "Mark as a production build", OptionType.BOOLEAN),),
    )

    async def run(self, inputs: list[str], options: NormalizedOptions) -> None:
        platform = inputs[0] if inputs else "browser"
        kind = "production" if options["prod"] else "development"
        print(f"Building {platform} ({kind})")
