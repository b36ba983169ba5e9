r"""Classification of attempt outcomes into "try again" or "stop".

A response is never converted into an error here. A status outside the
retryable set, such as 404, is a completed exchange and goes back to the
caller unchanged.
"""

from __future__ import annotations

__all__ = ["NON_RETRYABLE_ERRORS", "RetryDecider"]

import httpx

# Errors that a new attempt cannot fix
NON_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.DecodingError,
    httpx.TooManyRedirects,
)


class RetryDecider:
    r"""Tell the retry loop whether an attempt deserves a successor.

    Both methods answer with a ``(retry, reason)`` pair. The reason is
    only used in log messages.

    Args:
        status_forcelist: The status codes worth another attempt.

    Example:
        ```pycon
        >>> import httpx
        >>> from multicurl.retry import RetryDecider
        >>> decider = RetryDecider((503,))
        >>> decider.should_retry_response(httpx.Response(503), attempt=0, max_retries=2)
        (True, 'status 503')
        >>> decider.should_retry_response(httpx.Response(503), attempt=2, max_retries=2)
        (False, 'max retries exhausted')

        ```
    """

    def __init__(self, status_forcelist: tuple[int, ...]) -> None:
        self.status_forcelist = status_forcelist

    def should_retry_response(
        self, response: httpx.Response, attempt: int, max_retries: int
    ) -> tuple[bool, str]:
        r"""Judge a received response. ``attempt`` counts from 0."""
        if response.status_code not in self.status_forcelist:
            return (False, f"status {response.status_code}")
        if attempt >= max_retries:
            return (False, "max retries exhausted")
        return (True, f"status {response.status_code}")

    def should_retry_exception(
        self, exception: Exception, attempt: int, max_retries: int
    ) -> tuple[bool, str]:
        r"""Judge an error raised by the transport.

        The errors of ``NON_RETRYABLE_ERRORS`` stop the loop whatever the
        attempt. Any other error is retried while attempts remain.
        """
        if isinstance(exception, NON_RETRYABLE_ERRORS):
            return (False, f"{type(exception).__name__} is not retryable")
        if attempt >= max_retries:
            return (False, "max retries exhausted")
        return (True, f"{type(exception).__name__}")
