"""Date, calendar, and timestamp arithmetic helpers."""

from datetime import (
    date as _date,
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from typing import TypeVar, Union

from whenever import SystemDateTime, ZonedDateTime

from ._common import NS_PER_US, trunc_divmod

_UTC = _timezone.utc

Timestamp = Union[_datetime, ZonedDateTime, SystemDateTime]
TIMESTAMP_TYPES = (_datetime, ZonedDateTime, SystemDateTime)
_T = TypeVar("_T", _datetime, ZonedDateTime, SystemDateTime)


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def add_months(d: _date, months: int) -> _date:
    year_delta, month0_new = divmod(d.month - 1 + months, 12)
    year_new = d.year + year_delta
    month_new = month0_new + 1
    return d.replace(
        year=year_new,
        month=month_new,
        # only differs when we move to a month with fewer days
        day=min(d.day, days_in_month(year_new, month_new)),
    )


def shift(ts: _T, months: int, days: int, nanos: int) -> _T:
    """Shift a timestamp by calendar months and days first (keeping the
    local time of day), then by an exact amount of nanoseconds."""
    if isinstance(ts, (ZonedDateTime, SystemDateTime)):
        return ts.add(
            months=months,
            days=days,
            nanoseconds=nanos,
            disambiguate="compatible",
        )
    elif isinstance(ts, _datetime):
        try:
            return _shift_py_datetime(ts, months, days, nanos)
        except (OverflowError, ValueError):
            raise ValueError("Result out of range") from None
    raise TypeError(f"Cannot shift {type(ts).__name__!r} by a duration")


def _shift_py_datetime(
    dt: _datetime, months: int, days: int, nanos: int
) -> _datetime:
    if months or days:
        d = add_months(dt.date(), months) + _timedelta(days)
        # fold=0 resolves gaps and repeated times like 'compatible'
        dt = dt.replace(year=d.year, month=d.month, day=d.day, fold=0)
    # the standard library has microsecond precision only
    delta = _timedelta(microseconds=trunc_divmod(nanos, NS_PER_US)[0])
    if dt.tzinfo is None:
        return dt + delta
    # Exact time arithmetic through UTC. This also moves a wall time
    # in a DST gap forward, so it exists in the result's timezone.
    return (dt.astimezone(_UTC) + delta).astimezone(dt.tzinfo)
