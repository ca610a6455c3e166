import json
from unittest.mock import AsyncMock

import pytest
from pytest_asyncio import fixture

from plugcli.hooks import ProjectInfoHookResponse
from plugcli.manager import PlugCli
from plugcli.models import ExitCodeError, PageFetchError, ValidationErrors
from plugcli.plugins.core.apps import is_app_list_response

from .testtools import page


@fixture
async def manager(monkeypatch, tmp_path):
    "A manager with the core plugin only"
    monkeypatch.setattr("plugcli.config_loader.CONFIG_FILE", tmp_path / "missing.toml")
    instance = PlugCli()
    await instance.initialize()
    yield instance
    await instance.exit_plugins()


@pytest.mark.asyncio
async def test_version(manager, capsys):
    assert await manager.run_command(["version"]) == 0
    assert capsys.readouterr().out == "0.4.0\n"


@pytest.mark.asyncio
async def test_help_of_a_command(manager, capsys):
    assert await manager.run_command(["help", "plugin:list"]) == 0
    assert capsys.readouterr().out.startswith("Usage: plugcli plugin list")


@pytest.mark.asyncio
async def test_help_of_a_namespace(manager, capsys):
    assert await manager.run_command(["help", "plugin"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Usage: plugcli plugin <command>")
    assert "unload" in out


@pytest.mark.asyncio
async def test_info(manager, capsys):
    manager.hooks.register("extra", "info", AsyncMock(return_value=[]))
    assert await manager.run_command(["info", "--json"]) == 0
    items = json.loads(capsys.readouterr().out)
    assert items == [{"type": "cli", "name": "plugcli", "version": "0.4.0", "path": ""}]


@pytest.mark.asyncio
async def test_plugin_list(manager, capsys):
    assert await manager.run_command(["plugin", "list"]) == 0
    assert capsys.readouterr().out.split() == ["core", "0.4.0"]


@pytest.mark.asyncio
async def test_plugin_unload_requires_a_name(manager):
    with pytest.raises(ValidationErrors):
        await manager.run_command(["plugin", "unload"])


@pytest.mark.asyncio
async def test_plugin_unload_core(manager):
    with pytest.raises(ExitCodeError):
        await manager.run_command(["plugin", "unload", "core"])


@pytest.mark.asyncio
async def test_serve_options(manager, capsys):
    watch = AsyncMock(return_value=None)
    manager.hooks.register("test", "watch:before", watch)
    assert await manager.run_command(["serve", "-p", "8200", "-c"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Serving on http://0.0.0.0:8200")
    assert "consolelogs=True" in out
    assert watch.call_count == 1


@pytest.mark.asyncio
async def test_serve_bad_port(manager):
    with pytest.raises(ExitCodeError):
        await manager.run_command(["serve", "--port", "http"])


@pytest.mark.asyncio
async def test_build_rejects_unknown_platform(manager):
    with pytest.raises(ValidationErrors):
        await manager.run_command(["build", "windows"])


def test_is_app_list_response():
    assert is_app_list_response(page([{"id": "1", "name": "a"}]))
    assert is_app_list_response(page([]))
    assert not is_app_list_response(page([{"id": "1"}]))
    assert not is_app_list_response({"data": [], "meta": None})


@pytest.mark.asyncio
async def test_apps_list(manager, mocker, capsys):
    request = mocker.patch.object(
        manager.client,
        "request",
        AsyncMock(side_effect=[page([{"id": "a1", "name": "First", "slug": "first"}]), page([{"id": "a2", "name": "Second"}]), page([])]),
    )
    assert await manager.run_command(["apps:list", "--json"]) == 0
    apps = json.loads(capsys.readouterr().out)
    assert [app["id"] for app in apps] == ["a1", "a2"]
    assert request.call_count == 3
    assert request.call_args_list[0].args[0].params == {"page": "1", "page_size": "25"}


@pytest.mark.asyncio
async def test_apps_list_fetch_error(manager, mocker):
    mocker.patch.object(manager.client, "request", AsyncMock(side_effect=OSError("down")))
    with pytest.raises(PageFetchError):
        await manager.run_command(["apps", "ls"])


@pytest.mark.asyncio
async def test_info_with_project(manager, capsys):
    manager.hooks.register("proj", "project:info", lambda args: ProjectInfoHookResponse("app-1", "My App", "1.2.3"))
    assert await manager.run_command(["info"]) == 0
    out = capsys.readouterr().out
    assert "project:" in out
    assert "My App (app-1)" in out
    assert "1.2.3" in out
