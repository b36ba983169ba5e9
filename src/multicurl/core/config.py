r"""Defaults of a multicurl run and the retry settings of its client."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
]

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from multicurl.core.validation import validate_retry_params

if TYPE_CHECKING:
    from multicurl.backoff import BaseBackoffStrategy


# Seconds allowed for each attempt of each URL
DEFAULT_TIMEOUT = 10.0

# Retries after the first attempt, so at most 4 attempts per URL
DEFAULT_MAX_RETRIES = 3

# Base delay of the exponential backoff: 0.3s, 0.6s, 1.2s
DEFAULT_BACKOFF_FACTOR = 0.3

# Request Timeout, Too Many Requests and every server error
RETRY_STATUS_CODES = (408, 429, *range(500, 600))


@dataclass
class ClientConfig:
    r"""Retry settings shared by every request of a batch.

    The per-attempt timeout is not part of it: it belongs to the
    underlying ``httpx.AsyncClient``.

    Args:
        max_retries: Retries after the first attempt. Must be >= 0.
        backoff_factor: Base delay of the default exponential backoff,
            in seconds. Must be >= 0.
        status_forcelist: The HTTP status codes that are retried.
        jitter_factor: Random jitter added to each delay, as a fraction of
            it. Must be >= 0.
        backoff_strategy: Replaces the exponential backoff built from
            ``backoff_factor``.
        max_total_time: Optional time budget of one request, retries
            included, in seconds.
        max_wait_time: Optional cap of a single delay, in seconds.

    Raises:
        ValueError: If a setting is out of range.

    Example:
        ```pycon
        >>> from multicurl.core.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.max_retries, config.backoff_factor
        (3, 0.3)
        >>> config.merge(max_retries=0).max_retries
        0

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    status_forcelist: tuple[int, ...] = field(default_factory=lambda: RETRY_STATUS_CODES)
    jitter_factor: float = 0.0
    backoff_strategy: BaseBackoffStrategy | None = None
    max_total_time: float | None = None
    max_wait_time: float | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            self.max_retries,
            backoff_factor=self.backoff_factor,
            jitter_factor=self.jitter_factor,
            max_total_time=self.max_total_time,
            max_wait_time=self.max_wait_time,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        r"""Return a copy with the given settings replaced.

        ``None`` values are skipped and keep the current value. The copy is
        validated again.
        """
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    def to_dict(self) -> dict[str, Any]:
        r"""Return the settings as a flat dictionary, e.g. for logging.

        Example:
            ```pycon
            >>> from multicurl.core.config import ClientConfig
            >>> ClientConfig(max_retries=5).to_dict()["max_retries"]
            5

            ```
        """
        return {item.name: getattr(self, item.name) for item in fields(self)}
