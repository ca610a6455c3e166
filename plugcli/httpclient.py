"""HTTP API client built on aiohttp.

Usage:
    async with APIClient(host, token=token) as client:
        body = await client.do(client.make("GET", "/apps/my-app"))
        async for page in client.paginate(lambda: client.make("GET", "/apps"), is_paged_response):
            ...

The API answers with JSON bodies of two shapes:
    success: {"data": ..., "meta": {"status": 200, "version": ..., "request_id": ...}}
    error:   {"error": {"message": ..., "type": ..., "link": ...}, "meta": {...}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import aiohttp

from .constants import DEFAULT_API_HOST, DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT
from .logging_setup import get_logger
from .models import APIFormatError, APIRequestError, APIResponseError
from .paginator import Paginator

if TYPE_CHECKING:
    from typing import Self

__all__ = [
    "APIClient",
    "Request",
    "is_api_response_error",
    "is_api_response_success",
    "is_paged_response",
]

HTTP_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE", "PURGE", "HEAD", "OPTIONS")


def _has_meta(body: Any) -> bool:  # noqa: ANN401
    return isinstance(body, dict) and isinstance(body.get("meta"), dict)


def is_api_response_success(body: Any) -> bool:  # noqa: ANN401
    """Tell whether `body` is a success response."""
    return _has_meta(body) and "data" in body


def is_api_response_error(body: Any) -> bool:  # noqa: ANN401
    """Tell whether `body` is an error response."""
    return _has_meta(body) and isinstance(body.get("error"), dict)


def is_paged_response(body: Any) -> bool:  # noqa: ANN401
    """Tell whether `body` is a success response holding a list."""
    return is_api_response_success(body) and isinstance(body["data"], list)


@dataclass(frozen=True)
class Request:
    """An API request, not sent yet."""

    method: str
    path: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    json: Any = None

    def with_params(self, **params: Any) -> Request:  # noqa: ANN401
        """Return a copy with more query parameters."""
        return replace(self, params={**self.params, **{k: str(v) for k, v in params.items()}})


class APIClient:
    """Client of the plugcli JSON API.

    The aiohttp session is created on first use, unless one is given.
    """

    def __init__(
        self,
        host: str = DEFAULT_API_HOST,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session
        self._own_session = session is None
        self.log = log or get_logger("api")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @property
    def session(self) -> aiohttp.ClientSession:
        """The HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
            self._own_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if it was created by this client."""
        if self._session is not None and self._own_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def make(self, method: str, path: str) -> Request:
        """Prepare a request.

        Args:
            method: HTTP method name, case insensitive
            path: URL path, relative to the API host

        Raises:
            ValueError: for unknown methods
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            msg = f"Unknown HTTP method: {method}"
            raise ValueError(msg)
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return Request(method, path if path.startswith("/") else f"/{path}", headers=headers)

    async def request(self, req: Request) -> Any:  # noqa: ANN401
        """Send `req` and return the decoded JSON body, whatever its shape.

        Raises:
            APIRequestError: if the request can't be completed
            APIFormatError: if the body isn't JSON
        """
        url = f"{self.host}{req.path}"
        self.log.debug("%s %s %s", req.method, url, req.params)
        try:
            async with self.session.request(req.method, url, params=req.params, headers=req.headers, json=req.json) as response:
                text = await response.text()
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = f"{req.method} {url} failed: {e}"
            raise APIRequestError(msg) from e
        try:
            return json.loads(text)
        except ValueError as e:
            msg = f"Non JSON answer from {req.method} {url}"
            raise APIFormatError(msg, text) from e

    async def do(self, req: Request) -> dict[str, Any]:
        """Send `req` and return the success body.

        Raises:
            APIResponseError: on error bodies
            APIFormatError: on bodies of unknown shape
            APIRequestError: if the request can't be completed
        """
        body = await self.request(req)
        if is_api_response_success(body):
            return body  # type: ignore[no-any-return]
        if is_api_response_error(body):
            raise APIResponseError(body["meta"].get("status", 0), body["error"])
        msg = "Unknown response format"
        raise APIFormatError(msg, body)

    def paginate(
        self,
        reqgen: Callable[[], Request],
        guard: Callable[[Any], bool] = is_paged_response,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Paginator[dict[str, Any]]:
        """Iterate over a paged collection.

        `reqgen` builds a fresh request for every page; the `page` (starting
        at 1) and `page_size` query parameters are added to it.
        """

        async def fetch(index: int) -> Any:  # noqa: ANN401
            body = await self.request(reqgen().with_params(page=index + 1, page_size=page_size))
            if is_api_response_error(body):
                raise APIResponseError(body["meta"].get("status", 0), body["error"])
            return body

        return Paginator(fetch, guard)
