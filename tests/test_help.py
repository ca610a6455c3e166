import pytest

from plugcli.ansi import colorize, HelpStyles
from plugcli.commands.help import get_command_help, get_namespace_help
from plugcli.plugins.core.commands import BuildCommand, ServeCommand


@pytest.mark.asyncio
async def test_root_help(sample_tree):
    text = await get_namespace_help(sample_tree, colored=False)
    assert text.startswith("Usage: plugcli <command>")
    assert "Sample tree" in text
    assert "plugin" in text
    assert "plugin.list" in text
    assert "(aliases: ls)" in text
    assert "version" in text


@pytest.mark.asyncio
async def test_child_help_uses_relative_names(sample_tree):
    *_, plugin = await sample_tree.locate(["plugin"])
    text = await get_namespace_help(plugin, colored=False)
    assert text.startswith("Usage: plugcli plugin <command>")
    assert "  list " in text
    assert "plugin.list" not in text


@pytest.mark.asyncio
async def test_colored_help(sample_tree):
    text = await get_namespace_help(sample_tree, colored=True)
    assert colorize(f"{'apps':20s}", *HelpStyles.NAMESPACE) in text


def test_command_help():
    text = get_command_help(ServeCommand.metadata)
    assert text.startswith("Usage: plugcli serve")
    assert "--port, -p" in text
    assert "(default: 8100)" in text
    assert "--lab --consolelogs -s" in text


def test_command_help_inputs():
    text = get_command_help(BuildCommand.metadata, [])
    assert text.startswith("Usage: plugcli build [platform]")
    assert "Runs the build:before hooks" in text
