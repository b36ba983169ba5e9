r"""Report writing and failure aggregation.

The writer runs after every request of a batch completed. It writes one
record per URL, in input order, and computes whether the batch had a
failure: a request that never completed, or a status outside 2xx.
"""

from __future__ import annotations

__all__ = ["ensure_lengths", "format_result", "open_sink", "write_result", "write_results"]

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING

from multicurl.models import RequestFailure

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence
    from typing import TextIO

    from multicurl.models import HttpResult, RequestOutcome

logger: logging.Logger = logging.getLogger(__name__)


@contextmanager
def open_sink(path: str | None) -> Generator[TextIO, None, None]:
    r"""Open the primary output.

    Args:
        path: The output file, created or truncated. ``None`` means the
            standard output, which is not closed on exit.

    Raises:
        OSError: If the file cannot be created.
    """
    if path is None:
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as sink:  # noqa: PTH123
        yield sink


def format_result(result: HttpResult, latency: bool = False) -> str:
    r"""Render the record of a completed exchange.

    Example:
        ```pycon
        >>> from multicurl.models import HttpResult
        >>> from multicurl.output import format_result
        >>> print(format_result(HttpResult(200, "OK", body="hello"), latency=True))
        Status: 200 OK
        Content-Length: None
        Headers: []
        Body:
        hello
        Latency: 0.000ms
        <BLANKLINE>

        ```
    """
    lines = [
        f"Status: {result.status_line}",
        f"Content-Length: {result.content_length}",
        f"Headers: {result.headers.multi_items()}",
        "Body:",
        result.body,
    ]
    if latency:
        lines.append(f"Latency: {result.latency * 1000:.3f}ms")
    return "\n".join(lines) + "\n"


def write_result(sink: TextIO, result: HttpResult, latency: bool = False) -> None:
    sink.write(format_result(result, latency))
    sink.flush()


def ensure_lengths(urls: Sequence[str], outcomes: Sequence[RequestOutcome]) -> None:
    r"""Check that there is exactly one outcome per URL.

    Raises:
        ValueError: If the lengths differ.
    """
    if len(urls) != len(outcomes):
        msg = f"Expected one outcome per URL, got {len(outcomes)} outcomes for {len(urls)} URLs"
        raise ValueError(msg)


def write_results(
    urls: Sequence[str],
    outcomes: Sequence[RequestOutcome],
    sink: TextIO,
    latency: bool = False,
    err: TextIO | None = None,
) -> bool:
    r"""Write one record per URL and report the failures.

    Args:
        urls: The URLs of the batch.
        outcomes: The outcomes, index-aligned with ``urls``.
        sink: The primary output. It receives a record for every URL that
            produced a response, whatever its status.
        latency: If ``True``, each record ends with a latency line.
        err: The diagnostic output. Defaults to the standard error.

    Returns:
        ``True`` if any request never completed or returned a status
        outside 2xx.

    Raises:
        ValueError: If ``urls`` and ``outcomes`` have different lengths.
    """
    ensure_lengths(urls, outcomes)
    err = sys.stderr if err is None else err
    had_failure = False

    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, RequestFailure):
            logger.debug(f"{url}: no record, the request failed")
            err.write(f"Request to {url} failed: {outcome.message}\n")
            had_failure = True
            continue

        write_result(sink, outcome, latency)
        if not outcome.is_success:
            err.write(f"Request to {url} returned {outcome.status_line}\n")
            had_failure = True

    err.flush()
    return had_failure
