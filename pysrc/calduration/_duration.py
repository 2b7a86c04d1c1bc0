# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - A Duration stores exactly three fields: months, days, and nanoseconds.
#   Wider units (years, weeks, hours...) are folded into these at
#   construction and can't be recovered afterwards.
# - Months and days are *calendar* units: their length in exact time
#   depends on where they're applied. They are never converted into each
#   other or into nanoseconds, except on explicit request.
from __future__ import annotations

import warnings
from datetime import datetime as _datetime, timedelta as _timedelta
from typing import TYPE_CHECKING, ClassVar, Union, no_type_check, overload

from whenever import (
    DateDelta,
    DateTimeDelta,
    SystemDateTime,
    TimeDelta,
    ZonedDateTime,
)

from ._common import (
    NS_PER_DAY,
    NS_PER_HOUR,
    NS_PER_MIN,
    NS_PER_SEC,
    NS_PER_US,
    CalendarDaysAsExactTime,
    check_bounds,
    trunc_divmod,
)
from ._math import TIMESTAMP_TYPES, Timestamp, shift
from ._parse import duration_from_iso

__all__ = ["Duration", "calendar_days", "calendar_months"]

_object_new = object.__new__

Delta = Union[TimeDelta, DateDelta, DateTimeDelta, _timedelta]
_DELTA_TYPES = (TimeDelta, DateDelta, DateTimeDelta, _timedelta)


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


@final
class Duration(_ImmutableBase):
    """A duration of both calendar units (months, days) and exact time.

    Calendar units vary in length: a month has 28-31 days, and a day may
    last 23 or 25 hours during a DST transition. The exact time part always
    has the same length.

    The inputs are normalized into months, days, and nanoseconds:
    years become months, weeks become days, and everything from hours
    down becomes nanoseconds.

    Example
    -------
    >>> d = Duration(years=1, months=2, days=3, hours=4)
    >>> d
    Duration(P1Y2M3DT4H)
    >>> d.months, d.days, d.nanoseconds
    (14, 3, 14400000000000)
    >>> Duration(weeks=1) == Duration(days=7)
    True
    >>> Duration(days=1) == Duration(hours=24)  # calendar day != 24 hours
    False
    """

    __slots__ = ("_months", "_days", "_nanos")

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        for value in (
            years,
            months,
            weeks,
            days,
            hours,
            minutes,
            seconds,
            milliseconds,
            microseconds,
            nanoseconds,
        ):
            if not isinstance(value, int):
                raise TypeError(
                    f"Duration components must be integers, got {value!r}"
                )
        months += years * 12
        days += weeks * 7
        minutes += hours * 60
        seconds += minutes * 60
        milliseconds += seconds * 1_000
        microseconds += milliseconds * 1_000
        nanoseconds += microseconds * 1_000
        check_bounds(months, days, nanoseconds)
        self._months = months
        self._days = days
        self._nanos = nanoseconds

    ZERO: ClassVar[Duration]
    """A duration of zero"""

    @property
    def months(self) -> int:
        """The calendar months, including those given as years"""
        return self._months

    @property
    def days(self) -> int:
        """The calendar days, including those given as weeks"""
        return self._days

    @property
    def nanoseconds(self) -> int:
        """The exact time part, in nanoseconds"""
        return self._nanos

    @property
    def years(self) -> float:
        """The calendar months, expressed in years

        >>> Duration(months=18).years
        1.5
        """
        return self._months / 12

    @property
    def weeks(self) -> float:
        """The calendar days, expressed in weeks

        >>> Duration(days=14).weeks
        2.0
        """
        return self._days / 7

    @property
    def microseconds(self) -> float:
        """The exact time part, in microseconds"""
        return self._nanos / 1_000

    @property
    def milliseconds(self) -> float:
        """The exact time part, in milliseconds"""
        return self.microseconds / 1_000

    @property
    def seconds(self) -> float:
        """The exact time part, in seconds

        >>> Duration(minutes=2, milliseconds=500).seconds
        120.5
        """
        return self.milliseconds / 1_000

    @property
    def minutes(self) -> float:
        """The exact time part, in minutes"""
        return self.seconds / 60

    @property
    def hours(self) -> float:
        """The exact time part, in hours

        Note
        ----
        Calendar days aren't included. Use :meth:`to_span` if you
        need to treat them as 24 hours.

        >>> Duration(hours=3, minutes=30).hours
        3.5
        >>> Duration(days=1).hours
        0.0
        """
        return self.minutes / 60

    def is_zero(self) -> bool:
        """True if all fields are zero. Equivalent to ``not duration``"""
        return not (self._months or self._days or self._nanos)

    def __bool__(self) -> bool:
        """True if any field is non-zero

        Example
        -------
        >>> bool(Duration())
        False
        >>> bool(Duration(nanoseconds=1))
        True
        """
        return bool(self._months or self._days or self._nanos)

    def to_span(self, include_days: bool = False) -> TimeDelta:
        """Convert the exact time part to a :class:`~whenever.TimeDelta`.

        Calendar months are always dropped. Calendar days are dropped too,
        unless ``include_days`` is set.

        Warning
        -------
        With ``include_days=True``, each calendar day counts as exactly
        24 hours. This is wrong across DST transitions, so a
        :class:`CalendarDaysAsExactTime` warning is issued.

        Example
        -------
        >>> Duration(days=1, hours=1).to_span()
        TimeDelta(01:00:00)
        >>> Duration(days=1, hours=1).to_span(include_days=True)
        TimeDelta(25:00:00)
        """
        return TimeDelta(nanoseconds=self._exact_nanos(include_days))

    def to_timedelta(self, include_days: bool = False) -> _timedelta:
        """Convert the exact time part to a :class:`~datetime.timedelta`.

        Behaves like :meth:`to_span`, but nanoseconds are truncated
        to microseconds.
        """
        return _timedelta(
            microseconds=trunc_divmod(
                self._exact_nanos(include_days), NS_PER_US
            )[0]
        )

    def _exact_nanos(self, include_days: bool) -> int:
        if include_days and self._days:
            warnings.warn(
                "Calendar days converted to exact time as 24 hours each. "
                "This is incorrect across DST transitions.",
                CalendarDaysAsExactTime,
                stacklevel=3,
            )
            return self._nanos + self._days * NS_PER_DAY
        return self._nanos

    def to_month_span(self) -> DateDelta:
        """Convert the calendar months to a :class:`~whenever.DateDelta`.
        Days and exact time are dropped.

        >>> Duration(years=1, days=3).to_month_span()
        DateDelta(P1Y)
        """
        return DateDelta(months=self._months)

    @classmethod
    def from_delta(cls, delta: Delta, /) -> Duration:
        """Create from a :class:`~whenever.TimeDelta`,
        :class:`~whenever.DateDelta`, :class:`~whenever.DateTimeDelta`,
        or :class:`~datetime.timedelta`.

        Note
        ----
        The days of a :class:`~datetime.timedelta` are exactly 24 hours,
        so they end up in the exact time part, not in the calendar days.

        >>> Duration.from_delta(TimeDelta(hours=2))
        Duration(PT2H)
        >>> Duration.from_delta(DateDelta(years=1, weeks=2))
        Duration(P1Y14D)
        """
        if isinstance(delta, TimeDelta):
            return cls(nanoseconds=delta.in_nanoseconds())
        elif isinstance(delta, DateDelta):
            months, days = delta.in_months_days()
            return cls(months=months, days=days)
        elif isinstance(delta, DateTimeDelta):
            months, days, secs, nanos = delta.in_months_days_secs_nanos()
            return cls(
                months=months, days=days, seconds=secs, nanoseconds=nanos
            )
        elif isinstance(delta, _timedelta):
            return cls(microseconds=delta // _timedelta(microseconds=1))
        raise TypeError(
            f"Cannot create Duration from {type(delta).__name__!r}"
        )

    @classmethod
    def from_parts(cls, month_span: DateDelta, span: Delta, /) -> Duration:
        """Combine a calendar span and an exact time span

        >>> Duration.from_parts(DateDelta(years=1), TimeDelta(hours=1))
        Duration(P1YT1H)
        """
        return cls.from_delta(month_span) + cls.from_delta(span)

    def after(self, ts: Timestamp, /) -> Timestamp:
        """The time this duration after the given timestamp.

        Calendar months and days are applied first, keeping the
        local time of day. Then, the exact time is added.

        >>> d = Duration(days=1)
        >>> d.after(ZonedDateTime(2025, 3, 9, tz="America/New_York"))
        ZonedDateTime(2025-03-10 00:00:00-04:00[America/New_York])
        >>> Duration(hours=24).after(ZonedDateTime(2025, 3, 9, tz="America/New_York"))
        ZonedDateTime(2025-03-10 01:00:00-04:00[America/New_York])
        """
        return shift(ts, self._months, self._days, self._nanos)

    def before(self, ts: Timestamp, /) -> Timestamp:
        """The time this duration before the given timestamp.
        The inverse of :meth:`after`
        """
        return shift(ts, -self._months, -self._days, -self._nanos)

    def from_now(self, tz: str | None = None) -> Timestamp:
        """The time this duration from now, in the given timezone.
        If no timezone is given, the system timezone is used.
        """
        return self.after(_now(tz))

    def ago(self, tz: str | None = None) -> Timestamp:
        """The time this duration ago, in the given timezone.
        If no timezone is given, the system timezone is used.
        """
        return self.before(_now(tz))

    def format_iso8601(self) -> str:
        """Format as an ISO 8601 duration.

        Inverse of :meth:`parse_iso8601`, as long as no field is negative.

        Example
        -------
        >>> Duration(years=3, months=6, days=4, hours=12, minutes=30, seconds=5).format_iso8601()
        'P3Y6M4DT12H30M5S'
        >>> Duration(microseconds=1192).format_iso8601()
        'PT0.001192S'

        Note
        ----
        A zero duration formats as ``"P"``.
        ISO 8601 doesn't define a sign per field, so negative fields are
        formatted with their sign inline (e.g. ``P-2MT-1H``).
        These strings can't be parsed back.
        """
        iso = "P"
        if self._months:
            years, months = trunc_divmod(self._months, 12)
            iso += f"{years}Y" * bool(years) + f"{months}M" * bool(months)
        if self._days:
            iso += f"{self._days}D"
        if self._nanos:
            hrs, rem = trunc_divmod(self._nanos, NS_PER_HOUR)
            mins, rem = trunc_divmod(rem, NS_PER_MIN)
            secs, ns = trunc_divmod(rem, NS_PER_SEC)
            seconds = (
                (f"{'-' * (rem < 0)}{abs(secs)}.{abs(ns):09}".rstrip("0"))
                if ns
                else str(secs)
            )
            iso += (
                "T"
                + f"{hrs}H" * bool(hrs)
                + f"{mins}M" * bool(mins)
                + f"{seconds}S" * bool(rem)
            )
        return iso

    @classmethod
    def parse_iso8601(cls, s: str, /) -> Duration:
        """Parse an ISO 8601 duration

        The format is ``P(nY)(nM)(nW)(nD)(T(nH)(nM)(n.fS))``. Only the
        seconds may have a fraction. Designators must appear in this order,
        and there may not be any sign.

        Inverse of :meth:`format_iso8601`

        Example
        -------
        >>> Duration.parse_iso8601("P3Y6M4DT12H30M5.5S")
        Duration(P3Y6M4DT12H30M5.5S)
        >>> Duration.parse_iso8601("P2W")
        Duration(P14D)
        """
        years, months, weeks, days, hours, minutes, seconds, nanos = (
            duration_from_iso(s)
        )
        return cls(
            years=years,
            months=months,
            weeks=weeks,
            days=days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            nanoseconds=nanos,
        )

    def __eq__(self, other: object) -> bool:
        """Compare for equality, field by field

        Example
        -------
        >>> d = Duration(weeks=1, hours=4)
        >>> d == Duration(days=7, minutes=4 * 60)
        True
        >>> d == Duration(days=7, hours=3)
        False
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return (
            self._months == other._months
            and self._days == other._days
            and self._nanos == other._nanos
        )

    def __hash__(self) -> int:
        return hash((self._months, self._days, self._nanos))

    def __add__(self, other: Duration | Delta) -> Duration:
        """Add the fields of another duration to this one.
        Fields are added separately: days never overflow into months.

        Example
        -------
        >>> d = Duration(months=1, days=20)
        >>> d + Duration(days=20, hours=1)
        Duration(P1M40DT1H)
        >>> d + TimeDelta(minutes=30)
        Duration(P1M20DT30M)
        """
        if not isinstance(other, Duration):
            if not isinstance(other, _DELTA_TYPES):
                return NotImplemented
            other = Duration.from_delta(other)
        return self._from_fields(
            self._months + other._months,
            self._days + other._days,
            self._nanos + other._nanos,
        )

    @overload
    def __radd__(self, other: Delta) -> Duration: ...

    @overload
    def __radd__(self, other: _datetime) -> _datetime: ...

    def __radd__(self, other: Delta | _datetime) -> Duration | _datetime:
        """Add to a timestamp or other delta.
        Adding to a timestamp behaves the same as :meth:`after`
        """
        if isinstance(other, TIMESTAMP_TYPES):
            return self.after(other)
        elif isinstance(other, _DELTA_TYPES):
            return Duration.from_delta(other) + self
        return NotImplemented

    def __sub__(self, other: Duration | Delta) -> Duration:
        """Subtract the fields of another duration from this one

        Example
        -------
        >>> Duration(months=6, days=5) - Duration(months=1, days=7)
        Duration(P5M-2D)
        """
        if not isinstance(other, Duration):
            if not isinstance(other, _DELTA_TYPES):
                return NotImplemented
            other = Duration.from_delta(other)
        return self._from_fields(
            self._months - other._months,
            self._days - other._days,
            self._nanos - other._nanos,
        )

    @overload
    def __rsub__(self, other: Delta) -> Duration: ...

    @overload
    def __rsub__(self, other: _datetime) -> _datetime: ...

    def __rsub__(self, other: Delta | _datetime) -> Duration | _datetime:
        """Subtract from a timestamp or other delta.
        Subtracting from a timestamp behaves the same as :meth:`before`
        """
        if isinstance(other, TIMESTAMP_TYPES):
            return self.before(other)
        elif isinstance(other, _DELTA_TYPES):
            return Duration.from_delta(other) - self
        return NotImplemented

    def __mul__(self, other: int) -> Duration:
        """Multiply each field by an integer

        Example
        -------
        >>> Duration(months=1, days=2, seconds=3) * 2
        Duration(P2M4DT6S)
        """
        if not isinstance(other, int):
            return NotImplemented
        return self._from_fields(
            self._months * other, self._days * other, self._nanos * other
        )

    def __rmul__(self, other: int) -> Duration:
        return self * other

    def __floordiv__(self, other: int) -> Duration:
        """Divide each field by an integer, rounding toward negative
        infinity like Python's ``//`` does for integers

        Example
        -------
        >>> Duration(months=2, days=5, seconds=6) // 2
        Duration(P1M2DT3S)
        >>> Duration(days=-5) // 2
        Duration(P-3D)
        """
        if not isinstance(other, int):
            return NotImplemented
        return self._from_fields(
            self._months // other, self._days // other, self._nanos // other
        )

    def __neg__(self) -> Duration:
        """Negate each field

        Example
        -------
        >>> -Duration(months=1, hours=2)
        Duration(P-1MT-2H)
        """
        return self._from_fields(-self._months, -self._days, -self._nanos)

    def __pos__(self) -> Duration:
        """Return the duration unchanged"""
        return self

    __str__ = format_iso8601

    def __repr__(self) -> str:
        return f"Duration({self})"

    @no_type_check
    def __reduce__(self):
        return _unpkl_duration, (self._months, self._days, self._nanos)

    @classmethod
    def _from_fields(cls, months: int, days: int, nanos: int) -> Duration:
        check_bounds(months, days, nanos)
        new = _object_new(cls)
        new._months = months
        new._days = days
        new._nanos = nanos
        return new


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_duration(months: int, days: int, nanos: int) -> Duration:
    return Duration._from_fields(months, days, nanos)


Duration.ZERO = Duration()


def _now(tz: str | None) -> ZonedDateTime | SystemDateTime:
    return SystemDateTime.now() if tz is None else ZonedDateTime.now(tz)


def calendar_days(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of calendar days.
    ``calendar_days(1) == Duration(days=1)``
    """
    return Duration(days=i)


def calendar_months(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of calendar months.
    ``calendar_months(1) == Duration(months=1)``
    """
    return Duration(months=i)


# We expose the public members in the root of the module.
# For clarity, we remove the "_duration" part from the names,
# since this is an implementation detail.
for _member in (Duration, calendar_days, calendar_months, _unpkl_duration):
    _member.__module__ = "calduration"

del _member

# disable further subclassing
final(_ImmutableBase)
