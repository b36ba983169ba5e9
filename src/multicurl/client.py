r"""Asynchronous HTTP client with automatic retry logic.

This module provides ``ResilientClient``, an async context manager that
owns one ``httpx.AsyncClient`` (and so one connection pool) and sends
every request through the retry policy, and ``make_client``, the factory
called once per command line run.
"""

from __future__ import annotations

__all__ = ["ResilientClient", "make_client"]

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from multicurl.core.config import DEFAULT_TIMEOUT, ClientConfig
from multicurl.core.validation import validate_timeout
from multicurl.retry import AsyncRetryExecutor, RetryConfig

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType
    from typing import Self

    from multicurl.models import Header

logger: logging.Logger = logging.getLogger(__name__)


class ResilientClient:
    r"""Asynchronous context manager for resilient HTTP requests.

    The client is shared by every concurrent request of a batch. It is
    logically immutable once entered: only the connection pool of the
    underlying ``httpx.AsyncClient`` changes, and it is never exposed.

    Args:
        config: Optional ClientConfig instance for retry configuration.
            If ``None``, a default ClientConfig is used.
        timeout: Maximum seconds to wait for each attempt. Must be > 0.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            in tests.

    Example:
        ```pycon
        >>> import asyncio
        >>> from multicurl.client import ResilientClient
        >>> async def main():  # doctest: +SKIP
        ...     async with ResilientClient() as client:
        ...         return await client.request("GET", "https://api.example.com/data")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._timeout = timeout
        self._transport = transport
        self._config = config if config is not None else ClientConfig()
        self._executor = AsyncRetryExecutor(RetryConfig.from_client_config(self._config))

        # Client will be created when entering context
        self._client: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(max_retries={self._config.max_retries}, "
            f"timeout={self._timeout})"
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
            trust_env=False,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "ResilientClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        content: str | None = None,
        headers: Sequence[Header] = (),
    ) -> httpx.Response:
        r"""Send an HTTP request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, ...).
            url: The URL to send the request to.
            content: Optional request body.
            headers: Ordered header pairs. A repeated key is sent once
                per occurrence.

        Returns:
            The final response. Its body is fully read.

        Raises:
            RuntimeError: If called outside of the context manager.
            HttpRequestError: If the request never completed.
        """
        client = self._ensure_client()
        return await self._executor.execute(
            url=url,
            method=method,
            request_func=functools.partial(self._attempt, client, method),
            content=content,
            headers=list(headers),
        )

    async def _attempt(
        self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        r"""Send one attempt, bounded by the timeout as a whole.

        httpx applies its timeout to each connect, read, write and pool
        wait separately, so a server that trickles bytes could go past it.
        """
        deadline = self._timeout if isinstance(self._timeout, (int, float)) else None
        try:
            return await asyncio.wait_for(client.request(method, url=url, **kwargs), deadline)
        except asyncio.TimeoutError as exc:
            msg = f"no complete response within {deadline}s"
            raise httpx.TimeoutException(msg) from exc


def make_client(
    config: ClientConfig | None = None,
    *,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ResilientClient:
    r"""Create the client of a command line run.

    The default client waits at most 10 seconds per attempt and retries
    transient failures 3 times with exponential backoff.

    Args:
        config: Optional retry configuration.
        timeout: Maximum seconds to wait for each attempt.
        transport: Optional httpx transport.

    Returns:
        The client, to be entered with ``async with``.

    Example:
        ```pycon
        >>> from multicurl.client import make_client
        >>> client = make_client()
        >>> client.config.max_retries
        3

        ```
    """
    client = ResilientClient(config, timeout=timeout, transport=transport)
    logger.info(f"Created {client!r}")
    logger.debug(f"Retry configuration: {client.config.to_dict()}")
    return client
