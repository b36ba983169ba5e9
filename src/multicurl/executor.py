r"""Execution of a single HTTP exchange."""

from __future__ import annotations

__all__ = ["build_headers", "send_request"]

import logging
import time
from typing import TYPE_CHECKING

from multicurl.models import HttpResult, Method

if TYPE_CHECKING:
    from collections.abc import Sequence

    from multicurl.client import ResilientClient
    from multicurl.models import Body, Header

logger: logging.Logger = logging.getLogger(__name__)


def build_headers(headers: Sequence[Header], body: Body | None) -> list[Header]:
    r"""Return the headers to send, in input order.

    Duplicated keys are kept. The content type of the body is added when
    no ``Content-Type`` header was given.

    Example:
        ```pycon
        >>> from multicurl.executor import build_headers
        >>> from multicurl.models import Body, BodyKind
        >>> build_headers([("X-A", "1"), ("X-A", "2")], Body(BodyKind.JSON, "{}"))
        [('X-A', '1'), ('X-A', '2'), ('Content-Type', 'application/json')]

        ```
    """
    result = list(headers)
    if body is not None and body.content_type is not None:
        if not any(key.lower() == "content-type" for key, _ in result):
            result.append(("Content-Type", body.content_type))
    return result


async def send_request(
    client: ResilientClient,
    url: str,
    method: Method,
    body: Body | None = None,
    headers: Sequence[Header] = (),
) -> HttpResult:
    r"""Perform one HTTP exchange through the client.

    GET and DELETE requests are always sent without a body, even if one
    was supplied.

    Args:
        client: The shared client.
        url: The URL to request.
        method: The HTTP method.
        body: Optional request body.
        headers: Ordered header pairs.

    Returns:
        The captured result. ``latency`` covers the send, every retry
        and the full read of the final response.

    Raises:
        HttpRequestError: If the request never completed.
    """
    if body is not None and not method.allows_body:
        logger.debug(f"{method.value} {url}: dropping the {body.kind.value} body")
        body = None

    request_headers = build_headers(headers, body)
    logger.debug(f"{method.value} {url}: sending with {len(request_headers)} header(s)")

    start_time = time.perf_counter()
    response = await client.request(
        method.value,
        url,
        content=None if body is None else body.content,
        headers=request_headers,
    )
    latency = time.perf_counter() - start_time

    result = HttpResult.from_response(response, latency)
    logger.info(f"{method.value} {url}: {result.status_line} in {latency * 1000:.1f}ms")
    return result
