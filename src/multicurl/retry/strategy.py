r"""Delay policy of the retry loop."""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from typing import TYPE_CHECKING

from multicurl.backoff import ExponentialBackoff
from multicurl.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    import httpx

    from multicurl.backoff import BaseBackoffStrategy


class RetryStrategy:
    r"""Bundle the settings that decide how long to wait between two
    attempts.

    Args:
        jitter_factor: Upper bound of the random jitter, as a fraction of
            the delay.
        backoff_strategy: Defaults to ``ExponentialBackoff()``.
        max_wait_time: Optional cap of a single delay, in seconds.
    """

    def __init__(
        self,
        jitter_factor: float,
        backoff_strategy: BaseBackoffStrategy | None = None,
        max_wait_time: float | None = None,
    ) -> None:
        self.jitter_factor = jitter_factor
        self.backoff_strategy: BaseBackoffStrategy = backoff_strategy or ExponentialBackoff()
        self.max_wait_time = max_wait_time

    def calculate_delay(self, attempt: int, response: httpx.Response | None = None) -> float:
        r"""Return the delay in seconds after the failed attempt number
        ``attempt``, honoring the ``Retry-After`` header of ``response``."""
        return calculate_sleep_time(
            attempt,
            self.jitter_factor,
            response,
            backoff_strategy=self.backoff_strategy,
            max_wait_time=self.max_wait_time,
        )
