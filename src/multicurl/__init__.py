r"""multicurl - curl-like HTTP client that fetches many URLs concurrently.

Every URL of a batch is requested concurrently through one shared
client that retries transient failures (timeouts, connection errors,
5xx statuses) with exponential backoff. The outcomes are reported in the
order of the input URLs.

Example:
    ```pycon
    >>> import asyncio
    >>> import sys
    >>> from multicurl import RequestOptions, dispatch, write_results
    >>> options = RequestOptions(urls=("https://example.com/a", "https://example.com/b"))
    >>> outcomes = asyncio.run(dispatch(options.to_specs()))  # doctest: +SKIP
    >>> had_failure = write_results(options.urls, outcomes, sys.stdout)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "Body",
    "BodyKind",
    "ClientConfig",
    "HttpRequestError",
    "HttpResult",
    "Method",
    "RequestFailure",
    "RequestOptions",
    "RequestSpec",
    "ResilientClient",
    "ValidationReport",
    "__version__",
    "dispatch",
    "make_client",
    "parse_header",
    "request_many",
    "send_request",
    "validate_options",
    "write_results",
]

from importlib.metadata import PackageNotFoundError, version

from multicurl.client import ResilientClient, make_client
from multicurl.core.config import ClientConfig
from multicurl.dispatcher import dispatch, request_many
from multicurl.exceptions import HttpRequestError
from multicurl.executor import send_request
from multicurl.models import (
    Body,
    BodyKind,
    HttpResult,
    Method,
    RequestFailure,
    RequestOptions,
    RequestSpec,
)
from multicurl.output import write_results
from multicurl.validation import ValidationReport, parse_header, validate_options

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
