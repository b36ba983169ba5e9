r"""Concurrent fan-out of a batch of URLs.

Every URL of a batch becomes one asyncio task. The tasks share the
client, run concurrently, and are joined before returning. The outcomes
are returned in the order of the input URLs, never in completion order.
"""

from __future__ import annotations

__all__ = ["dispatch", "request_many"]

import asyncio
import logging
from typing import TYPE_CHECKING

from multicurl.client import make_client
from multicurl.exceptions import HttpRequestError
from multicurl.executor import send_request
from multicurl.models import RequestFailure
from multicurl.utils.structured_logging import correlation_scope

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from multicurl.client import ResilientClient
    from multicurl.core.config import ClientConfig
    from multicurl.models import Body, Header, Method, RequestOutcome, RequestSpec

logger: logging.Logger = logging.getLogger(__name__)


async def _request_one(
    index: int,
    client: ResilientClient,
    url: str,
    method: Method,
    body: Body | None,
    headers: Sequence[Header],
) -> tuple[int, RequestOutcome]:
    with correlation_scope(f"{index}:{url}"):
        try:
            outcome: RequestOutcome = await send_request(client, url, method, body, headers)
        except HttpRequestError as exc:
            logger.debug(f"{method.value} {url}: {exc}")
            outcome = RequestFailure(url=url, error=exc)
        except Exception as exc:  # noqa: BLE001
            # Still an outcome of this URL only
            logger.debug(f"{method.value} {url}: unexpected error", exc_info=True)
            outcome = RequestFailure(url=url, error=exc)
    return index, outcome


async def request_many(
    client: ResilientClient,
    urls: Sequence[str],
    method: Method,
    body: Body | None = None,
    headers: Sequence[Header] = (),
) -> list[RequestOutcome]:
    r"""Send one request per URL concurrently.

    A failing URL never cancels or affects the others: its terminal
    error is returned as a ``RequestFailure`` at its position.

    Args:
        client: The shared client. It must be entered.
        urls: The URLs of the batch.
        method: The HTTP method shared by the batch.
        body: The body shared by the batch. It is only sent for the
            methods that allow one.
        headers: The headers shared by the batch.

    Returns:
        One outcome per URL. Outcome ``i`` corresponds to ``urls[i]``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from multicurl.client import make_client
        >>> from multicurl.dispatcher import request_many
        >>> from multicurl.models import Method
        >>> async def main():  # doctest: +SKIP
        ...     async with make_client() as client:
        ...         return await request_many(
        ...             client, ["https://example.com/a", "https://example.com/b"], Method.GET
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    logger.info(f"Dispatching {len(urls)} {method.value} request(s)")
    tasks = [
        asyncio.create_task(_request_one(index, client, url, method, body, headers))
        for index, url in enumerate(urls)
    ]
    results = await asyncio.gather(*tasks)
    return [outcome for _, outcome in sorted(results, key=lambda item: item[0])]


async def dispatch(
    specs: Sequence[RequestSpec],
    config: ClientConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RequestOutcome]:
    r"""Build the client, send every request of a batch, and close the
    client.

    Args:
        specs: The resolved requests. They share one method, body and
            header set.
        config: Optional retry configuration.
        transport: Optional httpx transport.

    Returns:
        One outcome per spec, in input order.
    """
    if not specs:
        return []
    first = specs[0]
    async with make_client(config, transport=transport) as client:
        return await request_many(
            client, [spec.url for spec in specs], first.method, first.body, first.headers
        )
