r"""Delays that double after every failed attempt."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from multicurl.backoff.base import BaseBackoffStrategy
from multicurl.core.config import DEFAULT_BACKOFF_FACTOR


class ExponentialBackoff(BaseBackoffStrategy):
    r"""Wait ``base_delay * 2 ** attempt`` seconds, up to ``max_delay``.

    This is the backoff of the default client: 0.3s, 0.6s then 1.2s for
    its three retries.

    Args:
        base_delay: Delay before the first retry, in seconds.
        max_delay: Optional upper bound of any delay, in seconds.

    Raises:
        ValueError: If ``base_delay`` is negative or ``max_delay`` is not
            strictly positive.

    Example:
        ```pycon
        >>> from multicurl.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> [backoff.calculate(attempt) for attempt in range(3)]
        [0.3, 0.6, 1.2]
        >>> ExponentialBackoff(base_delay=2.0, max_delay=10.0).calculate(4)
        10.0

        ```
    """

    def __init__(
        self, base_delay: float = DEFAULT_BACKOFF_FACTOR, max_delay: float | None = None
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay}, max_delay={self.max_delay})"

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * 2**attempt
        if self.max_delay is None:
            return delay
        return min(delay, self.max_delay)
