"""Help texts for namespaces and commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from ..ansi import HelpStyles, colorize, should_colorize
from .models import CommandMetadata

if TYPE_CHECKING:
    from .namespace import Namespace

__all__ = ["get_command_help", "get_namespace_help"]


def _style(text: str, style: tuple[str, ...], colored: bool) -> str:
    return colorize(text, *style) if colored else text


async def get_namespace_help(namespace: Namespace, colored: bool | None = None) -> str:
    """Get the help of a namespace: its sub-namespaces and its commands.

    Commands of the sub-namespaces are listed with their dotted full name.
    Hidden commands are skipped.

    Args:
        namespace: The namespace to describe
        colored: Force colors on or off (auto-detected on stdout if None)
    """
    if colored is None:
        colored = should_colorize(sys.stdout)
    prefix = " ".join(["plugcli", *namespace.path()])
    lines = [f"Usage: {prefix} <command> [inputs] [options]", ""]
    if namespace.description:
        lines += [namespace.description, ""]

    if namespace.namespaces:
        lines.append("Namespaces:")
        for name in sorted(namespace.namespaces):
            child = await namespace.load_namespace(name)
            desc = child.description if child else ""
            lines.append(f"  {_style(f'{name:20s}', HelpStyles.NAMESPACE, colored)} {desc}")
        lines.append("")

    commands = [item for item in await namespace.get_command_metadata_list() if item.metadata.visible]
    if commands:
        lines.append("Commands:")
        base = ".".join(namespace.path())
        for item in sorted(commands, key=lambda item: item.full_name):
            name = item.full_name[len(base) + 1 :] if base else item.full_name
            line = f"  {_style(f'{name:20s}', HelpStyles.COMMAND, colored)} {item.metadata.description}"
            if item.aliases:
                line += " " + _style(f"(aliases: {', '.join(item.aliases)})", HelpStyles.ALIAS, colored)
            lines.append(line)
        lines.append("")

    return "\n".join(lines)


def get_command_help(metadata: CommandMetadata, path: list[str] | None = None) -> str:
    """Get the detailed help of a command.

    Args:
        metadata: The command metadata
        path: Names of the namespaces leading to the command
    """
    usage = ["plugcli", *(path or []), metadata.name]
    usage += [f"<{i.name}>" if i.required else f"[{i.name}]" for i in metadata.inputs if not i.private]
    lines = ["Usage: " + " ".join(usage), "", metadata.long_description or metadata.description, ""]

    inputs = [i for i in metadata.inputs if not i.private]
    if inputs:
        lines.append("Inputs:")
        lines += [f"  {i.name:20s} {i.description}" for i in inputs]
        lines.append("")

    options = [o for o in metadata.options if o.visible and not o.private]
    if options:
        lines.append("Options:")
        for option in options:
            flags = ", ".join([f"--{option.name}", *(f"-{a}" if len(a) == 1 else f"--{a}" for a in option.aliases)])
            default = f" (default: {option.default})" if option.default not in (None, "") else ""
            lines.append(f"  {flags:20s} {option.description}{default}")
        lines.append("")

    if metadata.aliases:
        lines += ["Aliases: " + ", ".join(metadata.aliases), ""]

    if metadata.example_commands:
        lines.append("Examples:")
        lines += [f"  {example}" for example in metadata.example_commands]
        lines.append("")

    return "\n".join(lines)
