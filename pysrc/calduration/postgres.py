"""Conversion between :class:`~calduration.Duration` and PostgreSQL's
``interval`` type.

An interval stores months, days, and microseconds, just like a
:class:`~calduration.Duration` does (with nanoseconds). Only microsecond
precision survives the round trip: smaller remainders are truncated.

Example
-------
>>> from calduration import Duration
>>> from calduration.postgres import format_interval, parse_interval
>>> format_interval(Duration(months=3, days=10, microseconds=1))
'3 months 10 days 1 microseconds'
>>> parse_interval("1 year 2 mons 3 days 04:05:06.789")
Duration(P1Y2M3DT4H5M6.789S)
"""

from __future__ import annotations

import logging
import re

from ._common import NS_PER_US, parse_err, trunc_divmod
from ._duration import Duration

__all__ = [
    "from_interval",
    "to_interval",
    "format_interval",
    "parse_interval",
]

_log = logging.getLogger(__name__)

_US_PER_SEC = 1_000_000

# unit name -> (field, multiplier). Field 0 is months, 1 days, 2 microseconds.
_UNITS = {
    "year": (0, 12),
    "years": (0, 12),
    "mon": (0, 1),
    "mons": (0, 1),
    "month": (0, 1),
    "months": (0, 1),
    "week": (1, 7),
    "weeks": (1, 7),
    "day": (1, 1),
    "days": (1, 1),
    "hour": (2, 3_600 * _US_PER_SEC),
    "hours": (2, 3_600 * _US_PER_SEC),
    "min": (2, 60 * _US_PER_SEC),
    "mins": (2, 60 * _US_PER_SEC),
    "minute": (2, 60 * _US_PER_SEC),
    "minutes": (2, 60 * _US_PER_SEC),
    "sec": (2, _US_PER_SEC),
    "secs": (2, _US_PER_SEC),
    "second": (2, _US_PER_SEC),
    "seconds": (2, _US_PER_SEC),
    "millisecond": (2, 1_000),
    "milliseconds": (2, 1_000),
    "microsecond": (2, 1),
    "microseconds": (2, 1),
}

_match_number = re.compile(r"[+-]?\d+", re.ASCII).fullmatch
_match_clock = re.compile(
    r"([+-])?(\d+):([0-5]\d):([0-5]\d)(?:\.(\d{1,6}))?", re.ASCII
).fullmatch


def from_interval(months: int, days: int, microseconds: int) -> Duration:
    """Create a duration from the fields of an interval"""
    return Duration(months=months, days=days, microseconds=microseconds)


def to_interval(d: Duration, /) -> tuple[int, int, int]:
    """The (months, days, microseconds) of an interval equivalent to the
    duration. Sub-microsecond precision is truncated."""
    micros, rest = trunc_divmod(d.nanoseconds, NS_PER_US)
    if rest:
        _log.debug(
            "Truncated %d nanoseconds converting %s to an interval", rest, d
        )
    return d.months, d.days, micros


def format_interval(d: Duration, /) -> str:
    """Format as a PostgreSQL interval literal, e.g.
    ``'1 months 2 days 3 microseconds'``.

    Components that are zero are left out.
    A zero duration is formatted as ``'0 seconds'``.
    """
    months, days, micros = to_interval(d)
    return (
        " ".join(
            f"{value} {unit}"
            for value, unit in (
                (months, "months"),
                (days, "days"),
                (micros, "microseconds"),
            )
            if value
        )
        or "0 seconds"
    )


def parse_interval(s: str, /) -> Duration:
    """Parse an interval as output by PostgreSQL with the default
    ``IntervalStyle`` (e.g. ``'-1 years 2 mons 3 days -04:05:06.5'``),
    or as formatted by :func:`format_interval`.

    Raises
    ------
    InvalidFormat
        If the string is not a recognized interval
    """
    fields = [0, 0, 0]
    tokens = s.split()
    if not tokens:
        parse_err(s, "empty interval")

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if match := _match_clock(token):
            sign, hrs, mins, secs, frac = match.groups()
            micros = (
                (int(hrs) * 60 + int(mins)) * 60 + int(secs)
            ) * _US_PER_SEC + int((frac or "").ljust(6, "0"))
            fields[2] += -micros if sign == "-" else micros
            i += 1
        elif _match_number(token) and i + 1 < len(tokens):
            try:
                field, multiplier = _UNITS[tokens[i + 1].lower()]
            except KeyError:
                parse_err(s, f"unknown unit {tokens[i + 1]!r}")
            fields[field] += int(token) * multiplier
            i += 2
        else:
            parse_err(s, f"unexpected {token!r}")

    months, days, micros = fields
    return from_interval(months, days, micros)
