from __future__ import annotations

import sys
from io import StringIO
from typing import TYPE_CHECKING

import httpx
import pytest

from multicurl.exceptions import HttpRequestError
from multicurl.models import HttpResult, RequestFailure
from multicurl.output import ensure_lengths, format_result, open_sink, write_result, write_results
from tests.helpers import sample_http_result

if TYPE_CHECKING:
    from pathlib import Path

URLS = ["https://example.com/a", "https://example.com/b", "https://example.com/c"]

EXPECTED_RECORD = (
    "Status: 200 OK\n"
    "Content-Length: 123\n"
    "Headers: [('content-type', 'application/json')]\n"
    "Body:\n"
    '{"message":"hello"}\n'
)


def make_failure(
    url: str, message: str = "GET request failed: Connection refused"
) -> RequestFailure:
    return RequestFailure(url=url, error=HttpRequestError(method="GET", url=url, message=message))


###############################
#     Tests for open_sink     #
###############################


def test_open_sink_stdout() -> None:
    with open_sink(None) as sink:
        assert sink is sys.stdout
    assert not sys.stdout.closed


def test_open_sink_file(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    path.write_text("old content")
    with open_sink(str(path)) as sink:
        sink.write("new")
    assert sink.closed
    assert path.read_text() == "new"


def test_open_sink_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(OSError), open_sink(str(tmp_path / "missing" / "out.txt")):
        pass


###################################
#     Tests for format_result     #
###################################


def test_format_result() -> None:
    assert format_result(sample_http_result()) == EXPECTED_RECORD


def test_format_result_latency() -> None:
    expected = EXPECTED_RECORD + "Latency: 42.000ms\n"
    assert format_result(sample_http_result(), latency=True) == expected


def test_format_result_duplicate_headers() -> None:
    result = HttpResult(
        200, "OK", headers=httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
    )
    assert "Headers: [('set-cookie', 'a=1'), ('set-cookie', 'b=2')]\n" in format_result(result)


def test_format_result_status_without_reason() -> None:
    assert format_result(HttpResult(599, "")).startswith("Status: 599\n")


def test_write_result() -> None:
    sink = StringIO()
    write_result(sink, sample_http_result())
    assert sink.getvalue() == EXPECTED_RECORD


####################################
#     Tests for ensure_lengths     #
####################################


def test_ensure_lengths_equal() -> None:
    ensure_lengths(URLS[:1], [sample_http_result()])


def test_ensure_lengths_mismatch() -> None:
    with pytest.raises(ValueError, match=r"got 1 outcomes for 3 URLs"):
        ensure_lengths(URLS, [sample_http_result()])


###################################
#     Tests for write_results     #
###################################


def test_write_results_all_success() -> None:
    sink, err = StringIO(), StringIO()
    outcomes = [sample_http_result() for _ in URLS]

    assert not write_results(URLS, outcomes, sink, err=err)
    assert sink.getvalue() == EXPECTED_RECORD * 3
    assert err.getvalue() == ""


def test_write_results_latency() -> None:
    sink, err = StringIO(), StringIO()

    write_results(URLS[:1], [sample_http_result()], sink, latency=True, err=err)
    assert sink.getvalue().endswith("Latency: 42.000ms\n")


def test_write_results_non_success_status() -> None:
    sink, err = StringIO(), StringIO()
    outcomes = [
        sample_http_result(),
        sample_http_result(500, "Internal Server Error"),
        sample_http_result(),
    ]

    assert write_results(URLS, outcomes, sink, err=err)
    records = sink.getvalue()
    assert records.count("Status: ") == 3
    assert "Status: 500 Internal Server Error\n" in records
    assert err.getvalue() == (
        "Request to https://example.com/b returned 500 Internal Server Error\n"
    )


def test_write_results_request_failure() -> None:
    sink, err = StringIO(), StringIO()
    outcomes = [sample_http_result(), make_failure(URLS[1]), sample_http_result()]

    assert write_results(URLS, outcomes, sink, err=err)
    assert sink.getvalue() == EXPECTED_RECORD * 2
    assert err.getvalue() == (
        "Request to https://example.com/b failed: GET request failed: Connection refused\n"
    )


def test_write_results_order_follows_urls() -> None:
    sink, err = StringIO(), StringIO()
    outcomes = [
        sample_http_result(201, "Created"),
        sample_http_result(202, "Accepted"),
        sample_http_result(204, "No Content"),
    ]

    write_results(URLS, outcomes, sink, err=err)
    lines = [line for line in sink.getvalue().splitlines() if line.startswith("Status: ")]
    assert lines == ["Status: 201 Created", "Status: 202 Accepted", "Status: 204 No Content"]


def test_write_results_redirect_is_a_failure() -> None:
    sink, err = StringIO(), StringIO()
    assert write_results(URLS[:1], [sample_http_result(302, "Found")], sink, err=err)


def test_write_results_length_mismatch() -> None:
    with pytest.raises(ValueError, match=r"one outcome per URL"):
        write_results(URLS, [], StringIO(), err=StringIO())


def test_write_results_empty() -> None:
    sink, err = StringIO(), StringIO()
    assert not write_results([], [], sink, err=err)
    assert sink.getvalue() == ""
