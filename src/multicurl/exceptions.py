r"""Exceptions raised by multicurl."""

from __future__ import annotations

__all__ = ["HeaderParseError", "HttpRequestError", "MulticurlError", "ValidationError"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from multicurl.validation import ValidationReport


class MulticurlError(Exception):
    r"""Base class of all the multicurl exceptions."""


class HttpRequestError(MulticurlError):
    r"""Exception raised when an HTTP request never completes.

    This is the terminal per-URL error: it is raised once the retry
    policy gave up (retries exhausted, non-retryable transport error or
    time budget exceeded).

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: A human readable description of the failure.
        status_code: The last HTTP status code received, if any.
        response: The last HTTP response received, if any.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from multicurl.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET", url="https://example.com", message="GET request failed"
        ... )
        >>> error.url
        'https://example.com'
        >>> str(error)
        'GET request failed'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code})"
        )


class ValidationError(MulticurlError):
    r"""Exception raised when the command line input has blocking
    errors.

    Args:
        report: The validation report that contains the errors.
    """

    def __init__(self, report: ValidationReport) -> None:
        super().__init__(f"Exiting with {len(report.errors)} error(s)")
        self.report = report


class HeaderParseError(MulticurlError, ValueError):
    r"""Exception raised when a ``KEY:VALUE`` header string has no
    colon."""
