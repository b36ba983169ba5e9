r"""Checks of the numeric settings of the client.

A bad setting is reported when the client is built, never in the middle
of a batch.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def _require(name: str, value: float | None, *, allow_zero: bool) -> None:
    if value is None:
        return
    if allow_zero and value < 0:
        msg = f"{name} must be >= 0, got {value}"
        raise ValueError(msg)
    if not allow_zero and value <= 0:
        msg = f"{name} must be > 0, got {value}"
        raise ValueError(msg)


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    r"""Check the per-attempt timeout of the client.

    An ``httpx.Timeout`` object is accepted as is.

    Raises:
        ValueError: If a numeric timeout is not strictly positive.

    Example:
        ```pycon
        >>> from multicurl.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(-1)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got -1

        ```
    """
    if isinstance(timeout, (int, float)):
        _require("timeout", timeout, allow_zero=False)


def validate_retry_params(
    max_retries: int,
    backoff_factor: float = 0.0,
    jitter_factor: float = 0.0,
    max_total_time: float | None = None,
    max_wait_time: float | None = None,
) -> None:
    r"""Check the settings of the retry policy.

    Args:
        max_retries: Retries after the first attempt. ``0`` disables
            retrying.
        backoff_factor: Base delay of the exponential backoff, in seconds.
        jitter_factor: Upper bound of the random jitter, as a fraction of
            the delay.
        max_total_time: Optional time budget of one request, retries
            included, in seconds.
        max_wait_time: Optional cap of a single backoff delay, in seconds.

    Raises:
        ValueError: If a count or factor is negative, or if a time limit
            is set and not strictly positive.
    """
    _require("max_retries", max_retries, allow_zero=True)
    _require("backoff_factor", backoff_factor, allow_zero=True)
    _require("jitter_factor", jitter_factor, allow_zero=True)
    _require("max_total_time", max_total_time, allow_zero=False)
    _require("max_wait_time", max_wait_time, allow_zero=False)
