r"""Retry package implementing the automatic retry policy of the client.

Public API:
    - RetryConfig: Configuration for retry behavior
    - RetryStrategy: Strategy for calculating retry delays
    - RetryDecider: Logic for deciding whether to retry
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryConfig", "RetryDecider", "RetryStrategy"]

from multicurl.retry.config import RetryConfig
from multicurl.retry.decider import RetryDecider
from multicurl.retry.executor import AsyncRetryExecutor
from multicurl.retry.strategy import RetryStrategy
