r"""Shared test helpers: in-process mock HTTP servers.

The mock servers are ``httpx.MockTransport`` instances, so no test needs
the network.
"""

from __future__ import annotations

__all__ = [
    "BASE_URL",
    "MockServer",
    "build_get_handler",
    "raising_handler",
    "sample_http_result",
    "status_handler",
]

import asyncio
import json
from typing import TYPE_CHECKING

import httpx

from multicurl.models import HttpResult

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://example.test"


class MockServer:
    r"""Mock HTTP server that routes requests by path.

    Each route is a handler that receives the request and returns a
    response, or raises an ``httpx`` exception to simulate a transport
    failure. Every received request is recorded.

    Args:
        routes: Mapping of URL path to handler.
        delays: Optional mapping of URL path to a response delay in seconds.
    """

    def __init__(
        self,
        routes: dict[str, Callable[[httpx.Request], httpx.Response]],
        delays: dict[str, float] | None = None,
    ) -> None:
        self.routes = routes
        self.delays = delays or {}
        self.requests: list[httpx.Request] = []
        self.completed: list[str] = []
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        delay = self.delays.get(path)
        if delay:
            await asyncio.sleep(delay)
        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, text="not found")
        response = handler(request)
        self.completed.append(path)
        return response

    def calls(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]


def build_get_handler(trailer: str = "") -> Callable[[httpx.Request], httpx.Response]:
    r"""Return a handler that echoes the URL as JSON when the request
    accepts JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("Accept") != "application/json":
            return httpx.Response(406, text="expected Accept: application/json")
        return httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            text=json.dumps({"url": f"http://localhost/get{trailer}"}),
        )

    return handler


def status_handler(status_code: int, text: str = "") -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(status_code, text=text)

    return handler


def raising_handler(exc: Exception) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        raise exc

    return handler


def sample_http_result(status_code: int = 200, reason_phrase: str = "OK") -> HttpResult:
    return HttpResult(
        status_code=status_code,
        reason_phrase=reason_phrase,
        headers=httpx.Headers({"Content-Type": "application/json"}),
        content_length=123,
        body='{"message":"hello"}',
        latency=0.042,
    )
