r"""Configuration dataclass for retry behavior."""

from __future__ import annotations

__all__ = ["RetryConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

from multicurl.backoff import ExponentialBackoff

if TYPE_CHECKING:
    from multicurl.backoff import BaseBackoffStrategy
    from multicurl.core.config import ClientConfig


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts.
        status_forcelist: Tuple of HTTP status codes that trigger retries.
        jitter_factor: Factor for adding random jitter to backoff delays.
        backoff_strategy: Optional backoff strategy.
        max_total_time: Optional maximum total time budget for all retries.
        max_wait_time: Optional maximum backoff delay cap.
    """

    max_retries: int
    status_forcelist: tuple[int, ...]
    jitter_factor: float = 0.0
    backoff_strategy: BaseBackoffStrategy | None = None
    max_total_time: float | None = None
    max_wait_time: float | None = None

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> RetryConfig:
        """Build the retry configuration of a client.

        The client ``backoff_factor`` becomes an ``ExponentialBackoff``
        when no explicit backoff strategy is set.
        """
        strategy = config.backoff_strategy
        if strategy is None:
            strategy = ExponentialBackoff(base_delay=config.backoff_factor)
        return cls(
            max_retries=config.max_retries,
            status_forcelist=config.status_forcelist,
            jitter_factor=config.jitter_factor,
            backoff_strategy=strategy,
            max_total_time=config.max_total_time,
            max_wait_time=config.max_wait_time,
        )
