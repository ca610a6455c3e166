import asyncio
from unittest.mock import AsyncMock

import pytest

from plugcli.httpclient import is_paged_response
from plugcli.models import PageFetchError
from plugcli.paginator import Paginator, PaginatorState

from .testtools import page


def make_fetch(responses):
    return AsyncMock(side_effect=list(responses))


@pytest.mark.asyncio
async def test_three_pages_then_bad_shape():
    fetch = make_fetch([page([1]), page([2]), page([3]), {"unexpected": True}])
    pages = [p async for p in Paginator(fetch, is_paged_response)]
    assert [p["data"] for p in pages] == [[1], [2], [3]]
    assert [call.args[0] for call in fetch.call_args_list] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_empty_page_ends():
    fetch = make_fetch([page([1, 2]), page([])])
    pages = [p async for p in Paginator(fetch, is_paged_response)]
    assert len(pages) == 1


@pytest.mark.asyncio
async def test_done_is_final():
    fetch = make_fetch([{"nope": 1}])
    paginator = Paginator(fetch, is_paged_response)
    assert await paginator.next_page() is None
    assert paginator.state == PaginatorState.DONE
    assert paginator.done
    assert await paginator.next_page() is None
    assert fetch.call_count == 1


@pytest.mark.asyncio
async def test_fetch_error_is_wrapped():
    fetch = make_fetch([page([1]), OSError("network down")])
    paginator = Paginator(fetch, is_paged_response)
    assert await paginator.next_page() is not None
    with pytest.raises(PageFetchError) as exc_info:
        await paginator.next_page()
    assert exc_info.value.page == 1
    assert isinstance(exc_info.value.__cause__, OSError)
    assert paginator.state == PaginatorState.READY


@pytest.mark.asyncio
async def test_concurrent_calls_are_serialized():
    seen = []

    async def fetch(index):
        seen.append(index)
        await asyncio.sleep(0.01)
        return page([index]) if index < 2 else {}

    paginator = Paginator(fetch, is_paged_response)
    results = await asyncio.gather(*(paginator.next_page() for _ in range(4)))
    assert [r["data"] for r in results if r] == [[0], [1]]
    assert seen == [0, 1, 2]
