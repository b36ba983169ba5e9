r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from multicurl.backoff.base import BaseBackoffStrategy
from multicurl.backoff.exponential import ExponentialBackoff
