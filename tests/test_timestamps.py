from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from whenever import (
    Instant,
    SystemDateTime,
    ZonedDateTime,
    patch_current_time,
)

from calduration import Duration, calendar_days, calendar_months

from .common import NYC, system_tz_nyc

NYC_INFO = ZoneInfo(NYC)
UTC = timezone.utc

# DST starts at 2am on this date
BEFORE_SPRING_FORWARD = ZonedDateTime(2025, 3, 9, tz=NYC)


class TestZonedDateTime:

    def test_exact_hours_across_dst(self):
        # Exact time: 24 hours later, the wall clock has moved 25 hours
        assert Duration(hours=24).after(BEFORE_SPRING_FORWARD) == (
            ZonedDateTime(2025, 3, 10, 1, tz=NYC)
        )

    def test_calendar_day_across_dst(self):
        # A calendar day keeps the same local time, though only 23 hours pass
        assert Duration(days=1).after(BEFORE_SPRING_FORWARD) == (
            ZonedDateTime(2025, 3, 10, tz=NYC)
        )

    def test_calendar_month(self):
        assert Duration(months=1).after(BEFORE_SPRING_FORWARD) == (
            ZonedDateTime(2025, 4, 9, tz=NYC)
        )

    def test_months_then_days_then_exact_time(self):
        d = Duration(months=1, days=1, hours=1)
        assert d.after(ZonedDateTime(2025, 1, 31, 12, tz=NYC)) == (
            ZonedDateTime(2025, 3, 1, 13, tz=NYC)
        )

    def test_before(self):
        timestamp = ZonedDateTime(2025, 1, 21, tz=NYC)
        assert calendar_days(1).before(timestamp) == ZonedDateTime(
            2025, 1, 20, tz=NYC
        )
        assert Duration(days=1).before(ZonedDateTime(2025, 3, 10, tz=NYC)) == (
            BEFORE_SPRING_FORWARD
        )
        assert Duration(hours=24).before(
            ZonedDateTime(2025, 3, 10, 1, tz=NYC)
        ) == (BEFORE_SPRING_FORWARD)

    def test_after(self):
        timestamp = ZonedDateTime(2025, 1, 21, tz=NYC)
        assert calendar_days(1).after(timestamp) == ZonedDateTime(
            2025, 1, 22, tz=NYC
        )

    def test_gap_resolves_compatible(self):
        # 2:30 doesn't exist on 2025-03-09 in New York
        assert Duration(days=1).after(
            ZonedDateTime(2025, 3, 8, 2, 30, tz=NYC)
        ) == ZonedDateTime(2025, 3, 9, 3, 30, tz=NYC)

    def test_nanoseconds(self):
        assert Duration(nanoseconds=5).after(
            BEFORE_SPRING_FORWARD
        ) == BEFORE_SPRING_FORWARD.add(nanoseconds=5)

    def test_zero(self):
        assert Duration().after(BEFORE_SPRING_FORWARD) == BEFORE_SPRING_FORWARD

    def test_system_datetime(self):
        with system_tz_nyc():
            ts = SystemDateTime(2025, 3, 9)
            expected = SystemDateTime(2025, 3, 10, 1)
            assert Duration(hours=24).after(ts) == expected
            assert Duration(days=1).after(ts) == SystemDateTime(2025, 3, 10)


class TestPyDatetime:

    def test_exact_hours_across_dst(self):
        dt = datetime(2025, 3, 9, tzinfo=NYC_INFO)
        expected = datetime(2025, 3, 10, 1, tzinfo=NYC_INFO)
        assert dt + Duration(hours=24) == expected
        assert Duration(hours=24).after(dt) == expected

    def test_calendar_day_across_dst(self):
        dt = datetime(2025, 3, 9, tzinfo=NYC_INFO)
        assert dt + Duration(days=1) == datetime(2025, 3, 10, tzinfo=NYC_INFO)

    def test_subtract(self):
        dt = datetime(2025, 3, 10, 1, tzinfo=NYC_INFO)
        assert dt - Duration(hours=24) == datetime(2025, 3, 9, tzinfo=NYC_INFO)
        expected = datetime(2025, 3, 9, 1, tzinfo=NYC_INFO)
        assert dt - Duration(days=1) == expected
        assert Duration(days=1).before(dt) == dt - Duration(days=1)

    def test_end_of_month_clamped(self):
        month = Duration(months=1)
        assert datetime(2025, 1, 31) + month == datetime(2025, 2, 28)
        assert datetime(2024, 1, 31) + month == datetime(2024, 2, 29)
        assert datetime(2025, 3, 31) - month == datetime(2025, 2, 28)
        year = Duration(years=1)
        assert datetime(2024, 2, 29) + year == datetime(2025, 2, 28)

    def test_months_then_days(self):
        # Jan 31 + 1 month = Feb 28, then + 1 day = Mar 1
        assert datetime(2025, 1, 31) + Duration(months=1, days=1) == datetime(
            2025, 3, 1
        )

    def test_gap_resolves_compatible(self):
        dt = datetime(2025, 3, 8, 2, 30, tzinfo=NYC_INFO)
        result = dt + Duration(days=1)
        assert result == datetime(2025, 3, 9, 3, 30, tzinfo=NYC_INFO)
        assert result.hour == 3
        expected_utc = datetime(2025, 3, 9, 7, 30, tzinfo=UTC)
        assert result.astimezone(UTC) == expected_utc

    def test_gap_same_with_exact_time(self):
        dt = datetime(2025, 3, 8, 2, 30, tzinfo=NYC_INFO)
        calendar_only = dt + Duration(days=1)
        with_micros = dt + Duration(days=1, microseconds=1)
        assert with_micros - calendar_only == timedelta(microseconds=1)
        assert (calendar_only.hour, with_micros.hour) == (3, 3)

    def test_naive(self):
        # No timezone: no DST to account for
        dt = datetime(2025, 3, 9)
        assert dt + Duration(hours=24) == datetime(2025, 3, 10)
        assert dt + Duration(days=1, minutes=1) == datetime(2025, 3, 10, 0, 1)

    def test_fixed_offset(self):
        tz = timezone(timedelta(hours=2))
        dt = datetime(2025, 3, 9, 12, tzinfo=tz)
        result = dt + Duration(months=2, hours=1)
        assert result == datetime(2025, 5, 9, 13, tzinfo=tz)
        assert result.tzinfo is tz

    def test_sub_microsecond_truncated(self):
        dt = datetime(2025, 3, 9)
        expected = dt + timedelta(microseconds=1)
        assert dt + Duration(nanoseconds=1_999) == expected

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="range"):
            datetime(9999, 12, 31) + Duration(days=1)


def test_unsupported_timestamp():
    with pytest.raises(TypeError, match="Instant"):
        instant = Instant.from_utc(2025, 1, 1)
        Duration(days=1).after(instant)  # type: ignore[arg-type]


class TestNow:

    def test_from_now(self):
        i = Instant.from_utc(2025, 3, 9, 5)
        with patch_current_time(i, keep_ticking=False):
            assert Duration(days=1).from_now(NYC) == ZonedDateTime(
                2025, 3, 10, tz=NYC
            )
            assert Duration(hours=24).from_now(NYC) == ZonedDateTime(
                2025, 3, 10, 1, tz=NYC
            )

    def test_ago(self):
        i = Instant.from_utc(2025, 1, 21, 5)
        with patch_current_time(i, keep_ticking=False):
            assert calendar_months(1).ago(NYC) == ZonedDateTime(
                2024, 12, 21, tz=NYC
            )

    def test_system_tz(self):
        i = Instant.from_utc(2025, 3, 9, 5)
        with system_tz_nyc(), patch_current_time(i, keep_ticking=False):
            result = Duration(days=1).from_now()
            assert isinstance(result, SystemDateTime)
            assert result == SystemDateTime(2025, 3, 10)
            assert Duration(days=1).ago() == SystemDateTime(2025, 3, 8)
