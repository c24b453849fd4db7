# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
HTTP date formatting and parsing (RFC 7231 section 7.1.1.1).

Purpose
=======
Date headers travel as strings but callers read and write them as epoch
milliseconds. Writing always produces the preferred IMF-fixdate form; reading
accepts the three forms a recipient must understand, tried in this order::

    IMF-fixdate   Sun, 06 Nov 1994 08:49:37 GMT
    RFC 850       Sunday, 06-Nov-94 08:49:37 GMT
    asctime       Sun Nov  6 08:49:37 1994

Parsing does not depend on the process locale: month and weekday names are
matched against fixed English tables.

Definition::

    def format_http_date(value: int | float | datetime) -> str
    def parse_http_date(value: str, *, formats=ALL_FORMATS) -> int
    def to_epoch_millis(value: datetime) -> int

Example::

    >>> format_http_date(784111777000)
    'Sun, 06 Nov 1994 08:49:37 GMT'
    >>> parse_http_date("Sunday, 06-Nov-94 08:49:37 GMT")
    784111777000
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import format_datetime

from ..exceptions import FormatError

__all__ = [
    "IMF_FIXDATE",
    "RFC850_DATE",
    "ASCTIME_DATE",
    "ALL_FORMATS",
    "format_http_date",
    "parse_http_date",
    "to_epoch_millis",
]

_MONTHS = {
    name: index
    for index, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}
_DAY = r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)[a-z]*"
_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
_ZONE = r"(?:GMT|UTC|UT)"

IMF_FIXDATE = re.compile(
    rf"^{_DAY},\s+(?P<day>\d{{1,2}})\s+(?P<month>[A-Za-z]{{3}})\s+(?P<year>\d{{4}})\s+{_TIME}\s+{_ZONE}$",
    re.IGNORECASE,
)
RFC850_DATE = re.compile(
    rf"^{_DAY},\s+(?P<day>\d{{1,2}})-(?P<month>[A-Za-z]{{3}})-(?P<year>\d{{2}})\s+{_TIME}\s+{_ZONE}$",
    re.IGNORECASE,
)
ASCTIME_DATE = re.compile(
    rf"^{_DAY}\s+(?P<month>[A-Za-z]{{3}})\s+(?P<day>\d{{1,2}})\s+{_TIME}\s+(?P<year>\d{{4}})$",
    re.IGNORECASE,
)
ALL_FORMATS = (IMF_FIXDATE, RFC850_DATE, ASCTIME_DATE)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def format_http_date(value: int | float | datetime) -> str:
    """
    Format a timestamp as an IMF-fixdate string in GMT.

    Args:
        value: Epoch milliseconds or a datetime (naive means UTC).

    Returns:
        String like ``"Sun, 06 Nov 1994 08:49:37 GMT"``.
    """
    if isinstance(value, datetime):
        moment = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    else:
        moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def _two_digit_year(year: int) -> int:
    # RFC 7231: a two-digit year more than 50 years in the future is in the past
    candidate = 2000 + year
    if candidate > datetime.now(timezone.utc).year + 50:
        candidate -= 100
    return candidate


def parse_http_date(value: str, *, formats: tuple[re.Pattern[str], ...] = ALL_FORMATS) -> int:
    """
    Parse an HTTP date string into epoch milliseconds.

    Each pattern in ``formats`` is tried in order and the first match wins.

    Args:
        value: Header value.
        formats: Accepted patterns, defaults to all three RFC 7231 forms.

    Returns:
        Epoch milliseconds (second resolution).

    Raises:
        FormatError: If no pattern matches or the fields are out of range.
    """
    text = value.strip()
    for pattern in formats:
        match = pattern.match(text)
        if match is None:
            continue
        month = _MONTHS.get(match.group("month").lower())
        if month is None:
            continue
        year = int(match.group("year"))
        if pattern is RFC850_DATE:
            year = _two_digit_year(year)
        try:
            moment = datetime(
                year,
                month,
                int(match.group("day")),
                int(match.group("hour")),
                int(match.group("minute")),
                int(match.group("second")),
                tzinfo=timezone.utc,
            )
        except ValueError:
            continue
        return to_epoch_millis(moment)
    raise FormatError(f"Cannot parse date value {value!r}", value)
