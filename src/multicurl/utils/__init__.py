r"""Utility functions for retry delays and logging."""

from __future__ import annotations

__all__ = [
    "calculate_sleep_time",
    "configure_logging",
    "correlation_scope",
    "parse_retry_after",
]

from multicurl.utils.retry_after import parse_retry_after
from multicurl.utils.sleep import calculate_sleep_time
from multicurl.utils.structured_logging import configure_logging, correlation_scope
