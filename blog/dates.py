# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Date and hour parsing for posts, and the fixed ``dd/MM/yyyy`` display format.

Parsing never raises: every parser returns either ``Parsed(value)`` or
``Invalid(raw, reason)`` and the caller decides how to degrade.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Generic, TypeVar, Union

from dateutil.parser import isoparse
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

T = TypeVar("T")

# +YYYYYY / -YYYYYY, the ISO 8601 expanded year representation
_EXPANDED_YEAR = re.compile(r"^([+-])(\d{6})(.*)$")
_HOUR = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

EMPTY_DATE_PLACEHOLDER = Markup("<div></div>")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    raw: Any
    reason: str


ParseResult = Union[Parsed[T], Invalid]


def _normalize_expanded_year(value: str) -> Union[str, Invalid]:
    match = _EXPANDED_YEAR.match(value)
    if not match:
        return value

    sign, digits, rest = match.groups()
    year = int(digits)
    if sign == "-" or not (1 <= year <= 9999):
        return Invalid(value, f"year {sign}{digits} is outside the supported calendar range")
    return f"{year:04d}{rest}"


def parse_iso_date(value: Any) -> ParseResult[datetime]:
    """Parse an ISO 8601 date or date-time string with strict calendar rules.

    Accepts calendar dates (extended and basic format), week dates
    (``2024-W10-2``), ordinal dates, expanded years (``+002024-03-05``), an
    optional time of day and an optional UTC offset. Impossible dates such as
    month 13 or day 32 are rejected.
    """
    if isinstance(value, datetime):
        return Parsed(value)
    if isinstance(value, date):
        return Parsed(datetime.combine(value, time.min))
    if not isinstance(value, str):
        return Invalid(value, f"expected a string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        return Invalid(value, "empty date string")

    normalized = _normalize_expanded_year(text)
    if isinstance(normalized, Invalid):
        return normalized

    try:
        return Parsed(isoparse(normalized))
    except (ValueError, OverflowError) as e:
        return Invalid(value, str(e))


def parse_hour(value: Any) -> ParseResult[time]:
    """Parse an ``HH:mm`` time of day (24 hour clock; the hour may be a single digit)."""
    if not isinstance(value, str):
        return Invalid(value, f"expected a string, got {type(value).__name__}")

    match = _HOUR.match(value.strip())
    if not match:
        return Invalid(value, "expected HH:mm")
    return Parsed(time(int(match.group(1)), int(match.group(2))))


def format_date(value: date) -> str:
    # strftime("%Y") does not zero-pad years below 1000 on every platform
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def format_display_date(value: Any) -> str:
    """Return ``dd/MM/yyyy`` for an ISO date string, or ``""`` when it is invalid."""
    result = parse_iso_date(value)
    if isinstance(result, Invalid):
        logger.warning("Invalid date %r: %s", result.raw, result.reason)
        return ""
    return format_date(result.value)


def render_date(value: Any) -> Markup:
    """Jinja filter: a ``<time>`` element, or an empty placeholder for invalid dates."""
    display = format_display_date(value)
    if not display:
        return EMPTY_DATE_PLACEHOLDER
    return Markup('<time datetime="{}">{}</time>').format(escape(str(value).strip()), display)
