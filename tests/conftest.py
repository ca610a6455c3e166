" generic fixtures "
import logging

import pytest

from plugcli.commands.command import Command
from plugcli.commands.models import CommandInput, CommandMetadata, CommandOption
from plugcli.commands.namespace import Namespace, RootNamespace
from plugcli.hooks import HookEngine
from plugcli.models import OptionType

from .testtools import CountingLoader, make_env


def pytest_configure():
    "Runs once before all"
    from plugcli.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "A logger for the configuration helpers"
    return logging.getLogger("plugcli.tests")


class ListCommand(Command):
    metadata = CommandMetadata(
        name="list",
        description="List things",
        options=(CommandOption("json", "JSON output", OptionType.BOOLEAN),),
    )

    async def run(self, inputs, options):
        return None


class UnloadCommand(Command):
    metadata = CommandMetadata(
        name="unload",
        description="Unload a thing",
        inputs=(CommandInput("name", "Thing name", required=True),),
    )

    async def run(self, inputs, options):
        return None


class VersionCommand(Command):
    metadata = CommandMetadata(name="version", description="Show the version", aliases=("v",))

    async def run(self, inputs, options):
        return None


@pytest.fixture
def loaders():
    "Counting loaders for the sample tree"
    return {
        "plugin": CountingLoader(
            lambda: Namespace("plugin", "Manage plugins", commands={"list": ListCommand, "ls": "list", "unload": UnloadCommand})
        ),
        "apps": CountingLoader(lambda: Namespace("apps", "Apps", commands={"list": ListCommand})),
    }


@pytest.fixture
def sample_tree(loaders):
    "root -> plugin (list, ls, unload), apps (list), version"
    return RootNamespace(
        "Sample tree",
        namespaces={"plugin": loaders["plugin"], "apps": loaders["apps"]},
        commands={"version": VersionCommand},
    )


@pytest.fixture
def hooks():
    "An empty hook engine"
    return HookEngine()


@pytest.fixture
def env():
    "A fake plugcli environment"
    return make_env()
