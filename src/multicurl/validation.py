r"""Validation of the command line input before any network activity.

The validator never raises: it collects every problem into a
``ValidationReport`` so that a user sees all of them in one run.
``ValidationReport.check_and_exit`` is the single place that turns
blocking errors into an exception.
"""

from __future__ import annotations

__all__ = [
    "ValidationReport",
    "check_url",
    "parse_header",
    "valid_url",
    "validate_options",
]

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from multicurl.exceptions import HeaderParseError, ValidationError
from multicurl.models import Method

if TYPE_CHECKING:
    from typing import TextIO

    from multicurl.models import Header, RequestOptions

logger: logging.Logger = logging.getLogger(__name__)

VALID_SCHEMES = ("http://", "https://")


def _reject_constant(name: str) -> float:
    # NaN, Infinity and -Infinity are accepted by the json module only
    msg = f"{name} is not a valid JSON value"
    raise ValueError(msg)


@dataclass
class ValidationReport:
    r"""Blocking errors and non-blocking warnings of one validation run.

    Example:
        ```pycon
        >>> from multicurl.validation import ValidationReport
        >>> report = ValidationReport(warnings=["Body not allowed for GET or DELETE"])
        >>> report.has_errors()
        False
        >>> report.check_and_exit()

        ```
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def check_and_exit(self, err: TextIO | None = None) -> None:
        r"""Print all the warnings, then all the errors, and abort if
        there is any error.

        Args:
            err: The diagnostic output. Defaults to the standard error.

        Raises:
            ValidationError: If the report contains at least one error.
        """
        err = sys.stderr if err is None else err
        if self.has_warnings():
            err.write("Warnings:\n")
            for warning in self.warnings:
                err.write(f"  - {warning}\n")

        if self.has_errors():
            err.write("Errors:\n")
            for error in self.errors:
                err.write(f"  - {error}\n")
            err.flush()
            logger.debug(f"Aborting with {len(self.errors)} validation error(s)")
            raise ValidationError(self)


def valid_url(url: str) -> bool:
    r"""Return ``True`` if the URL uses the HTTP or HTTPS scheme.

    Example:
        ```pycon
        >>> from multicurl.validation import valid_url
        >>> valid_url("https://route/to/page")
        True
        >>> valid_url("not_http://route/to/page")
        False

        ```
    """
    return url.startswith(VALID_SCHEMES)


def check_url(url: str) -> str | None:
    r"""Return the error message for a malformed URL, or ``None``."""
    if valid_url(url):
        return None
    return f"Invalid URL {url}: must start with http:// or https://"


def validate_options(options: RequestOptions) -> ValidationReport:
    r"""Validate the parsed command line input of a batch.

    Every rule is checked, so the report lists all the problems at once.

    Args:
        options: The parsed command line input.

    Returns:
        The validation report.

    Example:
        ```pycon
        >>> from multicurl.models import Method, RequestOptions
        >>> from multicurl.validation import validate_options
        >>> report = validate_options(
        ...     RequestOptions(urls=("ftp://example.com",), method=Method.POST, body="a", form="b")
        ... )
        >>> report.errors
        ['Invalid URL ftp://example.com: must start with http:// or https://', "Can't have more than one of body, json, and form"]

        ```
    """
    report = ValidationReport()

    for url in options.urls:
        error = check_url(url)
        if error is not None:
            report.errors.append(error)

    sources = options.body_sources()

    if options.method in (Method.GET, Method.DELETE) and sources:
        report.warnings.append("Body not allowed for GET or DELETE")

    if len(sources) > 1:
        report.errors.append("Can't have more than one of body, json, and form")

    if options.json is not None:
        try:
            json.loads(options.json, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            report.errors.append(f"JSON is not valid: {exc}")

    logger.debug(
        f"Validated {len(options.urls)} URL(s): {len(report.errors)} error(s), "
        f"{len(report.warnings)} warning(s)"
    )
    return report


def parse_header(text: str) -> Header:
    r"""Parse a ``KEY:VALUE`` header string.

    The string is split on the first colon and both sides are trimmed.

    Args:
        text: The header string.

    Returns:
        The ``(key, value)`` pair.

    Raises:
        HeaderParseError: If the string has no colon.

    Example:
        ```pycon
        >>> from multicurl.validation import parse_header
        >>> parse_header("Key: Value  ")
        ('Key', 'Value')
        >>> parse_header(":")
        ('', '')

        ```
    """
    key, sep, value = text.partition(":")
    if not sep:
        msg = f"invalid KEY:VALUE: no `:` found in `{text}`"
        raise HeaderParseError(msg)
    return key.strip(), value.strip()
