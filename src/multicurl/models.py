r"""Data model of a multicurl batch.

This module defines the resolved unit of work (``RequestSpec``), the
tagged request body (``Body``), and the per-URL outcome types
(``HttpResult`` and ``RequestFailure``).
"""

from __future__ import annotations

__all__ = [
    "Body",
    "BodyKind",
    "Header",
    "HttpResult",
    "Method",
    "RequestFailure",
    "RequestOptions",
    "RequestOutcome",
    "RequestSpec",
]

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

import httpx

if TYPE_CHECKING:
    from collections.abc import Sequence

Header = tuple[str, str]


class Method(enum.Enum):
    r"""HTTP methods supported by the command line."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str | Method) -> Method:
        r"""Parse a method name, ignoring case.

        Example:
            ```pycon
            >>> from multicurl.models import Method
            >>> Method.parse("post")
            <Method.POST: 'POST'>

            ```
        """
        if isinstance(value, Method):
            return value
        return cls(value.upper())

    @property
    def allows_body(self) -> bool:
        r"""``False`` for the methods that are always sent bodiless."""
        return self not in (Method.GET, Method.DELETE)


class BodyKind(enum.Enum):
    RAW = "body"
    JSON = "json"
    FORM = "form"


_CONTENT_TYPES = {
    BodyKind.JSON: "application/json",
    BodyKind.FORM: "application/x-www-form-urlencoded",
}


@dataclass(frozen=True)
class Body:
    r"""Request body chosen among the mutually exclusive body sources.

    Args:
        kind: The source of the body.
        content: The body text, sent as is.
    """

    kind: BodyKind
    content: str

    @property
    def content_type(self) -> str | None:
        return _CONTENT_TYPES.get(self.kind)


@dataclass(frozen=True)
class RequestOptions:
    r"""Parsed command line input of one invocation.

    The three body sources are kept apart so the validator can report
    conflicts. ``resolve_body`` collapses them into a single ``Body``.
    """

    urls: tuple[str, ...]
    method: Method = Method.GET
    body: str | None = None
    json: str | None = None
    form: str | None = None
    headers: tuple[Header, ...] = ()
    output: str | None = None
    latency: bool = False

    def body_sources(self) -> dict[BodyKind, str]:
        sources = {BodyKind.RAW: self.body, BodyKind.JSON: self.json, BodyKind.FORM: self.form}
        return {kind: value for kind, value in sources.items() if value is not None}

    def resolve_body(self) -> Body | None:
        r"""Return the body to send, or ``None``.

        When more than one source is present the precedence is
        json, then body, then form.

        Example:
            ```pycon
            >>> from multicurl.models import RequestOptions
            >>> RequestOptions(urls=("http://a",), body="x", json="{}").resolve_body()
            Body(kind=<BodyKind.JSON: 'json'>, content='{}')

            ```
        """
        sources = self.body_sources()
        for kind in (BodyKind.JSON, BodyKind.RAW, BodyKind.FORM):
            if kind in sources:
                return Body(kind=kind, content=sources[kind])
        return None

    def to_specs(self) -> list[RequestSpec]:
        r"""Build one ``RequestSpec`` per URL, in input order."""
        body = self.resolve_body()
        return [
            RequestSpec(url=url, method=self.method, body=body, headers=self.headers)
            for url in self.urls
        ]


@dataclass(frozen=True)
class RequestSpec:
    r"""One resolved unit of work."""

    url: str
    method: Method
    body: Body | None = None
    headers: tuple[Header, ...] = ()


@dataclass(frozen=True)
class HttpResult:
    r"""Outcome of one completed HTTP exchange.

    Args:
        status_code: The final HTTP status code.
        reason_phrase: The reason phrase of the status code.
        headers: All the response headers, duplicates included.
        content_length: The declared content length, if any.
        body: The response body decoded as text.
        latency: Elapsed seconds from the send to the end of the read.
    """

    status_code: int
    reason_phrase: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content_length: int | None = None
    body: str = ""
    latency: float = 0.0

    @classmethod
    def from_response(cls, response: httpx.Response, latency: float) -> HttpResult:
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=response.headers,
            content_length=_declared_content_length(response.headers),
            body=response.text,
            latency=latency,
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def status_line(self) -> str:
        return f"{self.status_code} {self.reason_phrase}".rstrip()


@dataclass(frozen=True)
class RequestFailure:
    r"""Terminal error of one URL whose request never completed."""

    url: str
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


RequestOutcome = Union[HttpResult, RequestFailure]


def _declared_content_length(headers: httpx.Headers | Sequence[Header]) -> int | None:
    value = httpx.Headers(headers).get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
