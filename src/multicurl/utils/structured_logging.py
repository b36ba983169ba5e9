r"""Logging configuration with optional structured (JSON) output.

Logging is configured from the environment, once per process:

- ``MULTICURL_LOG`` sets the level of the ``multicurl`` logger
  (``DEBUG``, ``INFO``, ``WARNING``, ...). Default is ``WARNING``.
- ``MULTICURL_LOG_FORMAT=json`` switches to one JSON object per line.

Each concurrent request runs with its own correlation ID (stored in a
context variable), so the log records of interleaved requests can be
told apart.

Example:
    ```shell
    MULTICURL_LOG=debug MULTICURL_LOG_FORMAT=json multicurl https://example.com
    ```
"""

from __future__ import annotations

__all__ = [
    "LOG_FORMAT_ENV",
    "LOG_LEVEL_ENV",
    "CorrelationIdFilter",
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "set_correlation_id",
]

import contextvars
import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping
    from typing import TextIO

LOG_LEVEL_ENV = "MULTICURL_LOG"
LOG_FORMAT_ENV = "MULTICURL_LOG_FORMAT"

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_installed_handler: logging.Handler | None = None

# Attributes of a plain LogRecord, excluded from the JSON extra fields
_RECORD_ATTRIBUTES = frozenset(
    {
        "args",
        "correlation_id",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def get_correlation_id() -> str | None:
    r"""Return the correlation ID of the running task, if any.

    Example:
        ```pycon
        >>> from multicurl.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("2:https://example.com/c")
        >>> get_correlation_id()
        '2:https://example.com/c'
        >>> clear_correlation_id()
        >>> print(get_correlation_id())
        None

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


@contextmanager
def correlation_scope(correlation_id: str) -> Generator[None, None, None]:
    r"""Tag the log records emitted inside the block with
    ``correlation_id``, then restore the previous tag."""
    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    r"""Expose the correlation ID to format strings as
    ``%(correlation_id)s``, ``-`` outside of a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    r"""Render each record as one JSON object per line.

    The object holds the UTC ``timestamp``, ``level``, ``logger``,
    ``message``, the ``module``/``function``/``line`` of the call, the
    ``correlation_id`` inside a request, the formatted ``exception`` if
    any, and every field given through ``extra``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from multicurl.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord({"msg": "retrying", "attempt": 2})
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('retrying', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            payload["correlation_id"] = correlation_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(payload, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        r"""ISO 8601 in UTC with milliseconds, e.g.
        ``2024-05-01T12:00:00.123Z``."""
        seconds = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{seconds}.{int(record.msecs):03d}Z"


def configure_logging(
    environ: Mapping[str, str] | None = None, stream: TextIO | None = None
) -> logging.Handler:
    """Configure the ``multicurl`` logger from the environment.

    Any handler installed by a previous call is replaced.

    Args:
        environ: The environment to read. Defaults to ``os.environ``.
        stream: The stream to log to. Defaults to ``sys.stderr``.

    Returns:
        The installed handler.

    Raises:
        ValueError: If the level is not a ``logging`` level name.
    """
    environ = os.environ if environ is None else environ
    level_name = environ.get(LOG_LEVEL_ENV, "WARNING").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        msg = f"{LOG_LEVEL_ENV} must be a logging level name, got {level_name!r}"
        raise ValueError(msg)

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.addFilter(CorrelationIdFilter())
    if environ.get(LOG_FORMAT_ENV, "").strip().lower() == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    global _installed_handler  # noqa: PLW0603
    logger = logging.getLogger("multicurl")
    if _installed_handler is not None:
        logger.removeHandler(_installed_handler)
    _installed_handler = handler
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler
