r"""Delay before the next attempt of a request."""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from multicurl.backoff.exponential import ExponentialBackoff
from multicurl.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    import httpx

    from multicurl.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    jitter_factor: float,
    response: httpx.Response | None,
    backoff_strategy: BaseBackoffStrategy | None = None,
    max_wait_time: float | None = None,
) -> float:
    r"""Return how long to sleep before retrying a failed attempt.

    The ``Retry-After`` header of the response wins over the backoff
    strategy. The result is then capped at ``max_wait_time`` and finally
    grown by a random jitter of up to ``jitter_factor`` times itself.

    Args:
        attempt: The number of the failed attempt, starting at 0.
        jitter_factor: Upper bound of the jitter, as a fraction of the
            delay. ``0`` disables it.
        response: The retryable response, or ``None`` after a transport
            error.
        backoff_strategy: Defaults to ``ExponentialBackoff()``.
        max_wait_time: Optional cap in seconds, applied before the jitter.

    Example:
        ```pycon
        >>> from multicurl.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(0, jitter_factor=0.0, response=None)
        0.3
        >>> calculate_sleep_time(2, jitter_factor=0.0, response=None)
        1.2
        >>> calculate_sleep_time(2, jitter_factor=0.0, response=None, max_wait_time=1.0)
        1.0

        ```
    """
    delay = None
    if response is not None:
        delay = parse_retry_after(response.headers.get("Retry-After"))
        if delay is not None:
            logger.debug(f"Server asked to retry in {delay:.2f}s")
    if delay is None:
        delay = (backoff_strategy or ExponentialBackoff()).calculate(attempt)

    if max_wait_time is not None:
        delay = min(delay, max_wait_time)

    if jitter_factor <= 0:
        logger.debug(f"Sleeping {delay:.2f}s before the next attempt")
        return delay
    jitter = delay * random.uniform(0, jitter_factor)  # noqa: S311
    logger.debug(f"Sleeping {delay + jitter:.2f}s before the next attempt ({jitter:.2f}s jitter)")
    return delay + jitter
