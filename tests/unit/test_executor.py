from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from multicurl.client import ResilientClient
from multicurl.executor import build_headers, send_request
from multicurl.models import Body, BodyKind, HttpResult, Method

TEST_URL = "https://api.example.com/data"


def make_client(response: httpx.Response) -> Mock:
    return Mock(spec=ResilientClient, request=AsyncMock(return_value=response))


###################################
#     Tests for build_headers     #
###################################


def test_build_headers_no_body() -> None:
    headers = [("Accept", "application/json"), ("X-A", "1")]
    assert build_headers(headers, None) == headers


def test_build_headers_keeps_duplicates_in_order() -> None:
    headers = [("X-A", "1"), ("X-B", "2"), ("X-A", "3")]
    assert build_headers(headers, None) == headers


def test_build_headers_raw_body_no_content_type() -> None:
    assert build_headers([], Body(BodyKind.RAW, "text")) == []


@pytest.mark.parametrize(
    ("kind", "content_type"),
    [(BodyKind.JSON, "application/json"), (BodyKind.FORM, "application/x-www-form-urlencoded")],
)
def test_build_headers_adds_content_type(kind: BodyKind, content_type: str) -> None:
    assert build_headers([("X-A", "1")], Body(kind, "x")) == [
        ("X-A", "1"),
        ("Content-Type", content_type),
    ]


def test_build_headers_explicit_content_type_wins() -> None:
    headers = [("content-type", "application/vnd.api+json")]
    assert build_headers(headers, Body(BodyKind.JSON, "{}")) == headers


def test_build_headers_does_not_mutate_input() -> None:
    headers = [("X-A", "1")]
    build_headers(headers, Body(BodyKind.JSON, "{}"))
    assert headers == [("X-A", "1")]


##################################
#     Tests for send_request     #
##################################


@pytest.mark.asyncio
async def test_send_request_get() -> None:
    client = make_client(httpx.Response(200, text="hello"))

    result = await send_request(client, TEST_URL, Method.GET, headers=[("Accept", "text/plain")])

    assert isinstance(result, HttpResult)
    assert result.status_code == 200
    assert result.body == "hello"
    assert result.latency >= 0.0
    client.request.assert_awaited_once_with(
        "GET", TEST_URL, content=None, headers=[("Accept", "text/plain")]
    )


@pytest.mark.asyncio
async def test_send_request_post_json_body() -> None:
    client = make_client(httpx.Response(201))

    result = await send_request(client, TEST_URL, Method.POST, Body(BodyKind.JSON, '{"a": 1}'))

    assert result.status_code == 201
    client.request.assert_awaited_once_with(
        "POST", TEST_URL, content='{"a": 1}', headers=[("Content-Type", "application/json")]
    )


@pytest.mark.asyncio
async def test_send_request_put_raw_body() -> None:
    client = make_client(httpx.Response(200))

    await send_request(client, TEST_URL, Method.PUT, Body(BodyKind.RAW, "raw data"))

    client.request.assert_awaited_once_with("PUT", TEST_URL, content="raw data", headers=[])


@pytest.mark.asyncio
@pytest.mark.parametrize("method", [Method.GET, Method.DELETE])
async def test_send_request_drops_body(method: Method) -> None:
    client = make_client(httpx.Response(200))

    await send_request(client, TEST_URL, method, Body(BodyKind.FORM, "a=1"))

    client.request.assert_awaited_once_with(method.value, TEST_URL, content=None, headers=[])


@pytest.mark.asyncio
async def test_send_request_non_success_status_is_a_result() -> None:
    client = make_client(httpx.Response(404, text="missing"))

    result = await send_request(client, TEST_URL, Method.GET)

    assert result.status_code == 404
    assert result.status_line == "404 Not Found"
    assert not result.is_success
