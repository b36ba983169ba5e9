from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from multicurl.utils import parse_retry_after

#######################################
#     Tests for parse_retry_after     #
#######################################


def test_parse_retry_after_none() -> None:
    assert parse_retry_after(None) is None


@pytest.mark.parametrize(
    ("header", "expected"), [("0", 0.0), ("1", 1.0), ("120", 120.0), ("2.5", 2.5)]
)
def test_parse_retry_after_seconds(header: str, expected: float) -> None:
    assert parse_retry_after(header) == expected


def test_parse_retry_after_negative_seconds_clamped() -> None:
    assert parse_retry_after("-5") == 0.0


def test_parse_retry_after_http_date_in_future() -> None:
    future = datetime.now(timezone.utc) + timedelta(seconds=60)
    delay = parse_retry_after(format_datetime(future, usegmt=True))
    assert delay is not None
    assert 55.0 <= delay <= 60.0


def test_parse_retry_after_http_date_in_past() -> None:
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0


@pytest.mark.parametrize("header", ["", "invalid", "soon"])
def test_parse_retry_after_invalid(header: str) -> None:
    assert parse_retry_after(header) is None
