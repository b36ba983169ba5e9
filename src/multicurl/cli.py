r"""Command line interface of multicurl.

Exit codes:
    0: every URL completed with a 2xx status.
    1: at least one URL failed (request error or status outside 2xx).
    2: invalid command line (usage or validation error), nothing sent.
"""

from __future__ import annotations

__all__ = ["main"]

import asyncio
import logging
from typing import TYPE_CHECKING

import click

from multicurl.dispatcher import dispatch
from multicurl.exceptions import HeaderParseError, ValidationError
from multicurl.models import Method, RequestOptions
from multicurl.output import open_sink, write_results
from multicurl.utils.structured_logging import configure_logging
from multicurl.validation import parse_header, validate_options

if TYPE_CHECKING:
    from multicurl.models import Header

logger: logging.Logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_headers(
    ctx: click.Context,  # noqa: ARG001
    param: click.Parameter,  # noqa: ARG001
    values: tuple[str, ...],
) -> tuple[Header, ...]:
    try:
        return tuple(parse_header(value) for value in values)
    except HeaderParseError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.command(help="Fetch one or more URLs concurrently, with automatic retries.")
@click.argument("urls", nargs=-1, required=True, metavar="URL...")
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False), default=None, metavar="FILE",
    help="Write the records to FILE instead of the standard output.",
)
@click.option("-b", "--body", default=None, metavar="BODY", help="Raw request body.")
@click.option("-j", "--json", "json_body", default=None, metavar="JSON", help="JSON request body.")
@click.option("-f", "--form", default=None, metavar="FORM", help="URL-encoded form request body.")
@click.option(
    "-H", "--header", "headers", multiple=True, callback=_parse_headers, metavar="KEY:VALUE",
    help="Add a request header. Repeatable.",
)
@click.option(
    "-m", "--method", type=click.Choice([m.value.lower() for m in Method], case_sensitive=False),
    default="get", show_default=True, help="HTTP method.",
)
@click.option("-l", "--latency", is_flag=True, help="Print the latency of each request.")
@click.version_option(package_name="multicurl")
@click.pass_context
def main(
    ctx: click.Context,
    urls: tuple[str, ...],
    output: str | None,
    body: str | None,
    json_body: str | None,
    form: str | None,
    headers: tuple[Header, ...],
    method: str,
    latency: bool,
) -> None:
    try:
        configure_logging()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    options = RequestOptions(
        urls=urls,
        method=Method.parse(method),
        body=body,
        json=json_body,
        form=form,
        headers=headers,
        output=output,
        latency=latency,
    )
    logger.info(f"multicurl: {len(urls)} URL(s), method {options.method.value}")

    try:
        validate_options(options).check_and_exit()
    except ValidationError:
        ctx.exit(EXIT_USAGE)

    try:
        with open_sink(options.output) as sink:
            outcomes = asyncio.run(dispatch(options.to_specs()))
            had_failure = write_results(options.urls, outcomes, sink, options.latency)
    except OSError as exc:
        raise click.FileError(options.output or "<stdout>", hint=str(exc)) from exc

    if had_failure:
        ctx.exit(EXIT_FAILURE)
