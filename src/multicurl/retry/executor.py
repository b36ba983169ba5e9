r"""The asynchronous retry loop.

A request goes through up to ``max_retries + 1`` attempts. The caller
only sees the outcome of the last one: a response, whatever its status,
or a terminal ``HttpRequestError``.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from multicurl.exceptions import HttpRequestError
from multicurl.retry.decider import RetryDecider
from multicurl.retry.strategy import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from multicurl.retry.config import RetryConfig

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    r"""Run a request function until it succeeds or the policy gives up.

    The ``decider`` says whether an outcome deserves another attempt and
    the ``strategy`` says how long to sleep before it.

    Args:
        retry_config: The retry policy.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from multicurl.retry import AsyncRetryExecutor, RetryConfig
        >>> executor = AsyncRetryExecutor(RetryConfig(max_retries=2, status_forcelist=(503,)))
        >>> async def fetch():
        ...     async with httpx.AsyncClient() as client:
        ...         return await executor.execute(
        ...             url="https://example.com", method="GET", request_func=client.get
        ...         )
        ...
        >>> asyncio.run(fetch())  # doctest: +SKIP

        ```
    """

    def __init__(self, retry_config: RetryConfig) -> None:
        self.config = retry_config
        self.strategy = RetryStrategy(
            retry_config.jitter_factor,
            backoff_strategy=retry_config.backoff_strategy,
            max_wait_time=retry_config.max_wait_time,
        )
        self.decider = RetryDecider(retry_config.status_forcelist)

    async def execute(
        self,
        url: str,
        method: str,
        request_func: Callable[..., Awaitable[httpx.Response]],
        **kwargs: Any,
    ) -> httpx.Response:
        r"""Send a request with retries.

        - A status outside ``status_forcelist`` is returned at once.
        - A status in ``status_forcelist`` is retried. Once no retry is
          left the last response is returned.
        - A transport error or a timeout is retried. Once no retry is left
          it becomes an ``HttpRequestError``.
        - An invalid URL, a request that cannot be built (``ValueError``,
          ``TypeError``) and the errors listed in ``NON_RETRYABLE_ERRORS``
          fail at once.

        Args:
            url: The URL, passed to ``request_func`` as ``url=``.
            method: The HTTP method, used in messages.
            request_func: The coroutine function that performs one attempt.
            **kwargs: Forwarded to ``request_func``.

        Returns:
            The last response received.

        Raises:
            HttpRequestError: If no response could be obtained.
        """
        max_retries = self.config.max_retries
        started = time.monotonic()
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            logger.debug(f"{method} {url}: attempt {attempt + 1}/{max_retries + 1}")
            response: httpx.Response | None = None
            try:
                response = await request_func(url=url, **kwargs)
            except (httpx.InvalidURL, ValueError, TypeError) as exc:
                # The request could not be built, e.g. a non-ASCII header value
                msg = f"{method} request to {url} failed: {exc}"
                raise HttpRequestError(method=method, url=url, message=msg, cause=exc) from exc
            except httpx.RequestError as exc:
                last_error = exc
                retry, reason = self.decider.should_retry_exception(exc, attempt, max_retries)
                if not retry:
                    logger.debug(f"{method} {url}: giving up ({reason})")
                    raise self._error_from_exception(exc, url, method, attempt) from exc
            else:
                retry, reason = self.decider.should_retry_response(response, attempt, max_retries)
                if not retry:
                    if response.status_code in self.decider.status_forcelist:
                        logger.info(
                            f"{method} {url}: still {response.status_code} after "
                            f"{attempt + 1} attempts"
                        )
                    return response
            logger.debug(f"{method} {url}: will retry ({reason})")

            if self.config.max_total_time is not None:
                elapsed = time.monotonic() - started
                if elapsed >= self.config.max_total_time:
                    logger.debug(f"{method} {url}: out of time after {elapsed:.2f}s")
                    if response is not None:
                        return response
                    msg = (
                        f"{method} request to {url} failed after {attempt + 1} attempts "
                        f"(max_total_time exceeded): {last_error}"
                    )
                    raise HttpRequestError(method=method, url=url, message=msg, cause=last_error)

            await asyncio.sleep(self.strategy.calculate_delay(attempt, response))

        # unreachable: the last attempt always returns or raises
        msg = f"{method} request to {url} failed after {max_retries + 1} attempts"
        raise HttpRequestError(method=method, url=url, message=msg, cause=last_error)  # pragma: no cover

    @staticmethod
    def _error_from_exception(
        exc: Exception, url: str, method: str, attempt: int
    ) -> HttpRequestError:
        if isinstance(exc, httpx.TimeoutException):
            msg = f"{method} request to {url} timed out ({attempt + 1} attempts)"
        else:
            msg = f"{method} request to {url} failed after {attempt + 1} attempts: {exc}"
        return HttpRequestError(method=method, url=url, message=msg, cause=exc)
