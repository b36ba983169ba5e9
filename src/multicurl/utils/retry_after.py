r"""Reading of the ``Retry-After`` response header (RFC 9110).

A server that answers 429 or 503 may say how long to wait before the
next attempt, either as a number of seconds or as an HTTP-date.
"""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)


def _seconds(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def parse_retry_after(retry_after_header: str | None) -> float | None:
    r"""Return the wait requested by a ``Retry-After`` header, in seconds.

    Args:
        retry_after_header: The header value, or ``None`` when the
            response has no such header.

    Returns:
        The delay in seconds, never negative (a date in the past gives
        ``0.0``), or ``None`` if the header is missing or malformed.

    Example:
        ```pycon
        >>> from multicurl.utils.retry_after import parse_retry_after
        >>> parse_retry_after("3")
        3.0
        >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT")
        0.0
        >>> print(parse_retry_after("soon"))
        None

        ```
    """
    if retry_after_header is None:
        return None

    seconds = _seconds(retry_after_header)
    if seconds is None:
        try:
            when = parsedate_to_datetime(retry_after_header)
        except (ValueError, TypeError, OverflowError):
            logger.debug(f"Ignoring malformed Retry-After header {retry_after_header!r}")
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0.0, seconds)
