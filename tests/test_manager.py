import sys
import types
from unittest.mock import AsyncMock

import pytest
from pytest_asyncio import fixture

from plugcli.hooks import HookName
from plugcli.manager import PlugCli, plugin_name
from plugcli.models import ConfigError, PluginLoadError
from plugcli.plugins.core import Extension as CoreExtension


@fixture
async def manager(monkeypatch, tmp_path):
    "A manager initialized without configuration file"
    monkeypatch.setattr("plugcli.config_loader.CONFIG_FILE", tmp_path / "missing.toml")
    instance = PlugCli()
    await instance.initialize()
    yield instance
    await instance.exit_plugins()


def write_config(tmp_path, content):
    conf = tmp_path / "config.toml"
    conf.write_text(content)
    return str(conf)


@pytest.mark.asyncio
async def test_core_plugin_always_loaded(manager):
    assert list(manager.plugins) == ["core"]
    assert isinstance(manager.root_plugin, CoreExtension)
    assert {"help", "version", "info", "serve", "build"} <= set(manager.namespace.commands)
    assert {"plugin", "apps"} <= set(manager.namespace.namespaces)


@pytest.mark.asyncio
async def test_settings_defaults(manager):
    assert manager.settings.get_int("page_size") == 25
    assert manager.client.host == "https://api.plugcli.dev"
    assert manager.client.token is None


@pytest.mark.asyncio
async def test_run_command(manager, capsys):
    assert await manager.run_command(["version"]) == 0
    assert capsys.readouterr().out.strip() == "0.4.0"


@pytest.mark.asyncio
async def test_invalid_section(tmp_path):
    instance = PlugCli()
    with pytest.raises(ConfigError):
        await instance.initialize(write_config(tmp_path, '[plugcli]\npage_size = "big"\n'))


@pytest.mark.asyncio
async def test_unknown_plugin(tmp_path):
    instance = PlugCli()
    with pytest.raises(PluginLoadError) as exc_info:
        await instance.initialize(write_config(tmp_path, '[plugcli]\nplugins = ["does_not_exist"]\n'))
    assert exc_info.value.name == "does_not_exist"


@pytest.mark.asyncio
async def test_plugin_loaded_twice_rejected(manager):
    with pytest.raises(PluginLoadError):
        await manager.load_plugin("core")
    assert list(manager.plugins) == ["core"]
    assert manager.hooks.get_sources(HookName.INFO) == ["core"]


@pytest.mark.asyncio
async def test_second_root_plugin_rejected(manager, monkeypatch):
    module = types.ModuleType("fakes.other_root")
    module.Extension = type("Extension", (CoreExtension,), {})
    monkeypatch.setitem(sys.modules, "fakes.other_root", module)
    with pytest.raises(PluginLoadError) as exc_info:
        await manager.load_plugin("fakes.other_root")
    assert "already the root plugin" in str(exc_info.value)
    assert "other_root" not in manager.plugins
    assert manager.hooks.get_sources(HookName.INFO) == ["core"]


@pytest.mark.asyncio
async def test_plugins_init_fired(monkeypatch, tmp_path):
    monkeypatch.setattr("plugcli.config_loader.CONFIG_FILE", tmp_path / "missing.toml")
    instance = PlugCli()
    fire = AsyncMock(return_value=[])
    monkeypatch.setattr(instance.hooks, "fire", fire)
    await instance.initialize()
    assert fire.call_args.args[0] == HookName.PLUGINS_INIT
    assert fire.call_args.args[1].env is instance


@pytest.mark.asyncio
async def test_core_plugin_cant_be_unloaded(manager):
    with pytest.raises(ValueError):
        await manager.unload_plugin("core")


@pytest.mark.asyncio
async def test_unload_unknown_plugin(manager):
    with pytest.raises(KeyError):
        await manager.unload_plugin("nope")


def test_plugin_name():
    assert plugin_name("core") == "core"
    assert plugin_name("plugcli_examples.build_timer") == "build_timer"
