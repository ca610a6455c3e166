"""Lazy loader cells and the name → loader maps of the namespace tree."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .command import Command
    from .namespace import Namespace

__all__ = ["CommandMap", "LazyCell", "NamespaceMap"]

T = TypeVar("T")


class LazyCell(Generic[T]):
    """Deferred construction of a value, loaded at most once.

    The loader may be a class, a function or a coroutine function. It runs in
    its own task: concurrent `get()` calls all wait for that single load, and
    cancelling one of them leaves the load running for the others. A failed
    load is not memoized: the waiters of that attempt get the error and the
    next `get()` calls the loader again.
    """

    def __init__(self, loader: Callable[[], Any]) -> None:
        self._loader = loader
        self._future: asyncio.Future[T] | None = None

    def __repr__(self) -> str:
        state = "loaded" if self.loaded else "pending"
        return f"<LazyCell {getattr(self._loader, '__name__', self._loader)!r} {state}>"

    @property
    def loaded(self) -> bool:
        """True once the value is available."""
        fut = self._future
        return fut is not None and fut.done() and not fut.cancelled() and fut.exception() is None

    async def get(self) -> T:
        """Return the value, loading it on first use."""
        if self._future is None:
            self._future = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._future)

    async def _load(self) -> T:
        try:
            value = self._loader()
            if inspect.isawaitable(value):
                value = await value
        except BaseException:
            self._future = None
            raise
        return value


def as_cell(value: LazyCell[T] | Callable[[], Any]) -> LazyCell[T]:
    """Wrap a loader into a LazyCell (cells are returned unchanged)."""
    if isinstance(value, LazyCell):
        return value
    if not callable(value):
        msg = f"Expected a loader, got {value!r}"
        raise TypeError(msg)
    return LazyCell(value)


class NamespaceMap(dict[str, "LazyCell[Namespace]"]):
    """Child namespace name → lazy namespace loader. No aliases."""

    def __init__(self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()) -> None:
        super().__init__()
        self.update(entries)

    def __setitem__(self, name: str, value: Any) -> None:  # noqa: ANN401
        if isinstance(value, str):
            msg = f"Namespace {name!r} can't be an alias"
            raise ValueError(msg)
        super().__setitem__(name, as_cell(value))

    def update(self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] = (), /, **kwargs: Any) -> None:  # type: ignore[override]  # noqa: ANN401
        """Add entries, wrapping loaders into cells."""
        items = entries.items() if isinstance(entries, Mapping) else entries
        for name, value in [*items, *kwargs.items()]:
            self[name] = value


class CommandMap(dict[str, "str | LazyCell[Command]"]):
    """Command name → lazy command loader, or alias → canonical command name.

    Aliases point to canonical entries only: an alias of an alias is rejected.
    """

    def __init__(self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()) -> None:
        super().__init__()
        self.update(entries)

    def __setitem__(self, name: str, value: Any) -> None:  # noqa: ANN401
        if isinstance(value, str):
            if value == name:
                msg = f"Alias {name!r} points to itself"
                raise ValueError(msg)
            if isinstance(dict.get(self, value), str):
                msg = f"Alias {name!r} targets {value!r}, which is an alias"
                raise ValueError(msg)
            if name in self.get_aliases():
                msg = f"{name!r} is the target of an alias and can't become an alias"
                raise ValueError(msg)
            super().__setitem__(name, value)
        else:
            super().__setitem__(name, as_cell(value))

    def update(self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] = (), /, **kwargs: Any) -> None:  # type: ignore[override]  # noqa: ANN401
        """Add entries, wrapping loaders into cells."""
        items = entries.items() if isinstance(entries, Mapping) else entries
        for name, value in [*items, *kwargs.items()]:
            self[name] = value

    def get_aliases(self) -> dict[str, list[str]]:
        """Return canonical name → list of its aliases."""
        aliases: dict[str, list[str]] = {}
        for name, value in self.items():
            if isinstance(value, str):
                aliases.setdefault(value, []).append(name)
        return aliases

    def resolve_aliases(self, name: str) -> LazyCell[Command] | None:
        """Return the cell of the command `name` is an alias of.

        Returns None when `name` isn't a known alias, including when it's a
        canonical name: those are looked up directly.
        """
        target = self.get(name)
        if not isinstance(target, str):
            return None
        cell = self.get(target)
        return cell if isinstance(cell, LazyCell) else None
