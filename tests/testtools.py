import asyncio
from typing import Any
from unittest.mock import MagicMock

from plugcli.hooks import HookEngine


class CountingLoader:
    "A loader counting its calls, optionally slow"

    def __init__(self, factory, delay: float = 0.0):
        self.factory = factory
        self.delay = delay
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.factory()


def make_env(hooks: HookEngine | None = None) -> MagicMock:
    "Return a stand-in for the PlugCli manager"
    env = MagicMock(name="env")
    env.hooks = hooks or HookEngine()
    env.plugins = {}
    return env


def page(items: list[Any], status: int = 200) -> dict[str, Any]:
    "Build a paged API response"
    return {"data": items, "meta": {"status": status, "version": "2.0", "request_id": "req"}}


def error_body(message: str = "not found", status: int = 404) -> dict[str, Any]:
    "Build an error API response"
    return {"error": {"message": message, "type": "not_found", "link": None}, "meta": {"status": status, "version": "2.0", "request_id": "req"}}
