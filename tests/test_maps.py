import asyncio

import pytest

from plugcli.commands.maps import CommandMap, LazyCell, NamespaceMap

from .testtools import CountingLoader


class Dummy:
    pass


def test_command_map_wraps_loaders():
    cmds = CommandMap({"list": Dummy, "ls": "list"})
    assert isinstance(cmds["list"], LazyCell)
    assert cmds["ls"] == "list"


def test_get_aliases():
    cmds = CommandMap({"list": Dummy, "ls": "list", "l": "list", "unload": Dummy, "rm": "unload"})
    assert cmds.get_aliases() == {"list": ["ls", "l"], "unload": ["rm"]}


def test_resolve_aliases():
    cmds = CommandMap({"list": Dummy, "ls": "list"})
    assert cmds.resolve_aliases("ls") is cmds["list"]
    assert cmds.resolve_aliases("list") is None
    assert cmds.resolve_aliases("missing") is None


def test_alias_of_alias_rejected():
    cmds = CommandMap({"list": Dummy, "ls": "list"})
    with pytest.raises(ValueError):
        cmds["l"] = "ls"


def test_alias_target_cant_become_alias():
    cmds = CommandMap({"list": Dummy, "ls": "list", "show": Dummy})
    with pytest.raises(ValueError):
        cmds["list"] = "show"


def test_self_alias_rejected():
    cmds = CommandMap()
    with pytest.raises(ValueError):
        cmds["ls"] = "ls"


def test_namespace_map_has_no_aliases():
    namespaces = NamespaceMap()
    with pytest.raises(ValueError):
        namespaces["p"] = "plugin"


def test_non_callable_rejected():
    with pytest.raises(TypeError):
        CommandMap({"list": 42})


@pytest.mark.asyncio
async def test_cell_loads_once():
    loader = CountingLoader(Dummy)
    cell = LazyCell(loader)
    assert not cell.loaded
    first = await cell.get()
    second = await cell.get()
    assert first is second
    assert loader.calls == 1
    assert cell.loaded


@pytest.mark.asyncio
async def test_cell_concurrent_loads_are_single_flight():
    loader = CountingLoader(Dummy, delay=0.05)
    cell = LazyCell(loader)
    results = await asyncio.gather(*(cell.get() for _ in range(5)))
    assert loader.calls == 1
    assert all(result is results[0] for result in results)


@pytest.mark.asyncio
async def test_cell_sync_loader():
    cell = LazyCell(Dummy)
    assert isinstance(await cell.get(), Dummy)


@pytest.mark.asyncio
async def test_cell_failure_not_memoized():
    calls = []

    async def flaky():
        calls.append(1)
        await asyncio.sleep(0.01)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return Dummy()

    cell = LazyCell(flaky)
    results = await asyncio.gather(cell.get(), cell.get(), return_exceptions=True)
    assert all(isinstance(r, RuntimeError) for r in results)
    assert not cell.loaded

    assert isinstance(await cell.get(), Dummy)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_cell_load_survives_a_cancelled_caller():
    loader = CountingLoader(Dummy, delay=0.05)
    cell = LazyCell(loader)
    first = asyncio.ensure_future(cell.get())
    await asyncio.sleep(0)
    second = asyncio.ensure_future(cell.get())
    await asyncio.sleep(0.01)
    first.cancel()

    assert isinstance(await second, Dummy)
    assert first.cancelled()
    assert loader.calls == 1
    assert cell.loaded
