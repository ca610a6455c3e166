"""Hook engine: named extension points plugins subscribe to.

Listeners are registered per source (the plugin name) and fired
concurrently. Results come back in registration order.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from .logging_setup import get_logger, log_context
from .models import HookListenerError

if TYPE_CHECKING:
    from .manager import PlugCli

__all__ = [
    "HOOK_RESULTS",
    "EnvironmentHookArgs",
    "Hook",
    "HookEngine",
    "HookName",
    "InfoHookItem",
    "ProjectInfoHookResponse",
]

HookListener = Callable[[Any], Any]


class HookName(StrEnum):
    """Well known hooks. Plugins may also fire and listen to their own names."""

    INFO = "info"
    PROJECT_INFO = "project:info"
    PLUGINS_INIT = "plugins:init"
    BUILD_BEFORE = "build:before"
    BUILD_AFTER = "build:after"
    WATCH_BEFORE = "watch:before"
    BACKEND_CHANGED = "backend:changed"


@dataclass
class EnvironmentHookArgs:
    """Arguments passed to every well known hook."""

    env: PlugCli


@dataclass
class InfoHookItem:
    """One line of the `info` command, returned by `info` listeners."""

    type: str
    name: str
    version: str
    path: str = ""


@dataclass
class ProjectInfoHookResponse:
    """Project description returned by `project:info` listeners."""

    id: str
    name: str
    version: str = ""


# What a listener of each hook may return besides None
HOOK_RESULTS: dict[str, type | None] = {
    HookName.INFO: list,
    HookName.PROJECT_INFO: ProjectInfoHookResponse,
    HookName.PLUGINS_INIT: None,
    HookName.BUILD_BEFORE: None,
    HookName.BUILD_AFTER: None,
    HookName.WATCH_BEFORE: None,
    HookName.BACKEND_CHANGED: None,
}


@dataclass(frozen=True)
class Hook:
    """A listener registered by `source` on the hook `name`."""

    name: str
    source: str
    listener: HookListener

    async def fire(self, args: Any) -> Any:  # noqa: ANN401
        """Call the listener, awaiting it when needed."""
        result = self.listener(args)
        if inspect.isawaitable(result):
            result = await result
        return result


class HookEngine:
    """Registry of hook listeners."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = {}
        self.log = get_logger("hooks")

    def register(self, source: str, hook: str, listener: HookListener) -> Hook:
        """Register `listener` from `source` on `hook`.

        Registering the same listener twice makes it fire twice.
        """
        entry = Hook(str(hook), source, listener)
        # a new list, so fires in progress keep their snapshot
        self._hooks[entry.name] = [*self._hooks.get(entry.name, []), entry]
        self.log.debug("%s listens to %s", source, entry.name)
        return entry

    async def fire(self, hook: str, args: Any = None) -> list[Any]:  # noqa: ANN401
        """Run every listener of `hook` concurrently.

        The listener list is captured when the fire starts: listeners added or
        removed meanwhile don't affect it.

        Returns:
            The listener results, in registration order

        Raises:
            HookListenerError: if a listener fails
        """
        hooks = self.get_registered(hook)
        if not hooks:
            return []
        self.log.debug("Firing %s on %d listener(s)", hook, len(hooks))

        async def _run(entry: Hook) -> Any:  # noqa: ANN401
            try:
                result = await entry.fire(args)
            except Exception as e:
                self.log.exception("Listener from %s failed on %s", entry.source, entry.name)
                raise HookListenerError(entry.name, entry.source) from e
            self._check_result(entry, result)
            return result

        with log_context(str(hook)):
            return list(await asyncio.gather(*(_run(entry) for entry in hooks)))

    def _check_result(self, entry: Hook, result: Any) -> None:  # noqa: ANN401
        if result is None or entry.name not in HOOK_RESULTS:
            return
        expected = HOOK_RESULTS[entry.name]
        if expected is None or not isinstance(result, expected):
            self.log.warning("Listener from %s returned an unexpected %s on %s", entry.source, type(result).__name__, entry.name)

    def get_registered(self, hook: str) -> list[Hook]:
        """Return the listeners of `hook`, in registration order."""
        return list(self._hooks.get(str(hook), []))

    def get_sources(self, hook: str) -> list[str]:
        """Return the distinct sources listening to `hook`, in registration order."""
        sources: list[str] = []
        for entry in self._hooks.get(str(hook), []):
            if entry.source not in sources:
                sources.append(entry.source)
        return sources

    def has_sources(self, hook: str, sources: Iterable[str]) -> bool:
        """Tell whether every one of `sources` listens to `hook`."""
        registered = set(self.get_sources(hook))
        return all(source in registered for source in sources)

    def delete_source(self, source: str) -> None:
        """Remove every listener registered by `source`."""
        for name, hooks in list(self._hooks.items()):
            kept = [entry for entry in hooks if entry.source != source]
            if kept:
                self._hooks[name] = kept
            else:
                del self._hooks[name]
        self.log.debug("Removed the listeners of %s", source)
