import sys

import pytest

from plugcli.command import main, run_client, use_param
from plugcli.models import ExitCode


@pytest.fixture(autouse=True)
def no_default_config(monkeypatch, tmp_path):
    monkeypatch.setattr("plugcli.config_loader.CONFIG_FILE", tmp_path / "missing.toml")


def test_use_param():
    argv = ["plugcli", "--config", "x.toml", "version"]
    assert use_param("--config", argv) == "x.toml"
    assert argv == ["plugcli", "version"]
    assert use_param("--debug", argv) == ""


@pytest.mark.asyncio
async def test_success():
    assert await run_client(["version"]) == ExitCode.SUCCESS


@pytest.mark.asyncio
async def test_no_command_prints_help(capsys):
    assert await run_client([]) == ExitCode.USAGE_ERROR
    assert capsys.readouterr().out.startswith("Usage: plugcli <command>")


@pytest.mark.asyncio
async def test_unknown_command(capsys):
    assert await run_client(["plugin", "nope"]) == ExitCode.USAGE_ERROR
    assert capsys.readouterr().out.startswith("Usage: plugcli plugin <command>")


@pytest.mark.asyncio
async def test_help_flag(capsys):
    assert await run_client(["--help"]) == ExitCode.SUCCESS
    assert "Commands:" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_validation_error():
    assert await run_client(["plugin", "unload"]) == ExitCode.VALIDATION_ERROR


@pytest.mark.asyncio
async def test_command_error():
    assert await run_client(["plugin", "unload", "missing"]) == ExitCode.COMMAND_ERROR


@pytest.mark.asyncio
async def test_config_error(tmp_path):
    assert await run_client(["version"], str(tmp_path / "missing.toml")) == ExitCode.CONFIG_ERROR


def test_main_exit_code(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["plugcli", "version"])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0
