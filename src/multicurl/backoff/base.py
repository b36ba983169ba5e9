r"""Interface of the backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    r"""Maps a retry number to the delay that precedes it.

    The retry policy of the client asks its strategy for a delay before
    every retry, unless the server sent a ``Retry-After`` header.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        r"""Return the delay in seconds before retrying.

        Args:
            attempt: The number of the failed attempt, starting at 0. The
                delay before the first retry uses ``attempt=0``.
        """
