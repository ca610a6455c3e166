"""Forward-only pagination over a page fetching coroutine."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .logging_setup import get_logger
from .models import PageFetchError

__all__ = ["Paginator", "PaginatorState"]

P = TypeVar("P")

PageGuard = Callable[[Any], bool]


class PaginatorState(StrEnum):
    """Paginator states."""

    READY = "ready"
    FETCHING = "fetching"
    DONE = "done"


class Paginator(Generic[P]):
    """Iterates pages fetched one by one.

    `fetch(page)` is called with page indexes 0, 1, 2... and `guard` tells
    whether the response is a valid page. Iteration ends on the first
    response the guard rejects, or on a page with an empty `data` list.
    Errors raised by `fetch` are wrapped in `PageFetchError`.

    Eg:
        async for page in Paginator(fetch, is_paged_response):
            print(page["data"])
    """

    def __init__(self, fetch: Callable[[int], Awaitable[Any]], guard: PageGuard) -> None:
        self._fetch = fetch
        self._guard = guard
        self._lock = asyncio.Lock()
        self.page = 0
        self.state = PaginatorState.READY
        self.log = get_logger("paginator")

    @property
    def done(self) -> bool:
        """True once the last page was reached."""
        return self.state == PaginatorState.DONE

    async def next_page(self) -> P | None:
        """Fetch the next page.

        Returns:
            The page, or None once the pages are exhausted

        Raises:
            PageFetchError: if fetching failed. The same page is fetched on the next call.
        """
        async with self._lock:
            if self.state == PaginatorState.DONE:
                return None
            self.state = PaginatorState.FETCHING
            try:
                response = await self._fetch(self.page)
            except Exception as e:
                self.state = PaginatorState.READY
                raise PageFetchError(self.page) from e

            if not self._guard(response):
                self.log.debug("Page %d has an unexpected shape, stopping", self.page)
                self.state = PaginatorState.DONE
                return None
            if isinstance(response, dict) and not response.get("data"):
                self.log.debug("Page %d is empty, stopping", self.page)
                self.state = PaginatorState.DONE
                return None

            self.page += 1
            self.state = PaginatorState.READY
            return response  # type: ignore[no-any-return]

    def __aiter__(self) -> Paginator[P]:
        return self

    async def __anext__(self) -> P:
        page = await self.next_page()
        if page is None:
            raise StopAsyncIteration
        return page
