"""Parsing of loosely-typed activity fields.

Activity fields arrive from JSON bodies and multipart forms alike, so the
same field may be a bool, a number or a string. These helpers coerce them
to the stored types or raise ValidationError.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

from sports_tracker.exceptions import ValidationError

TRUTHY_TOKENS = frozenset({"true", "1", "on", "yes"})
FALSY_TOKENS = frozenset({"false", "0", "off", "no"})

# Largest value the INTEGER duration column holds
MAX_DURATION_MINUTES = 2**31 - 1

# Leading YYYY-MM-DD of a date or ISO datetime string
DATE_PREFIX_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})")


def parse_boolean_flag(value: Any, default: bool = False) -> bool:
    """Parse a tolerant boolean.

    `true/1/on/yes` map to True and `false/0/off/no` to False,
    case-insensitively. Anything else, including None and the empty
    string, yields `default`.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if normalized in TRUTHY_TOKENS:
        return True
    if normalized in FALSY_TOKENS:
        return False
    return default


def coerce_duration(value: Any) -> int:
    """Coerce a duration in minutes to a positive integer.

    Raises:
        ValidationError: If the value is not a positive whole number
    """
    if isinstance(value, bool):
        raise ValidationError("durationMinutes must be a positive number.")

    if isinstance(value, str):
        value = value.strip()

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("durationMinutes must be a positive number.")

    if number != number or number <= 0:  # NaN or non-positive
        raise ValidationError("durationMinutes must be a positive number.")
    if not number.is_integer():
        raise ValidationError("durationMinutes must be a whole number of minutes.")
    if number > MAX_DURATION_MINUTES:
        raise ValidationError("durationMinutes is too large.")

    return int(number)


def normalize_date(value: Any) -> dt.date:
    """Normalize a calendar date.

    Accepts `date` objects, `datetime` objects (their own calendar date, no
    time-zone conversion) and strings starting with `YYYY-MM-DD`. A
    trailing time part is ignored rather than interpreted as an instant,
    so the stored date never shifts with the server's time zone.

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    match = DATE_PREFIX_PATTERN.match(str(value).strip())
    if not match:
        raise ValidationError("date must be a calendar date in YYYY-MM-DD format.")

    try:
        return dt.date(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
        )
    except ValueError:
        raise ValidationError("date must be a calendar date in YYYY-MM-DD format.")


def is_missing(value: Any) -> bool:
    """True for None and blank strings."""
    return value is None or (isinstance(value, str) and not value.strip())
