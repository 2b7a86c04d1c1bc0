from typing import NoReturn

# Bounds of the stored fields
MAX_MONTHS = 2**31 - 1
MIN_MONTHS = -(2**31)
MAX_DAYS = 2**31 - 1
MIN_DAYS = -(2**31)
MAX_NANOS = 2**63 - 1
MIN_NANOS = -(2**63)

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_SEC = 1_000_000_000
NS_PER_MIN = 60_000_000_000
NS_PER_HOUR = 3_600_000_000_000
NS_PER_DAY = 86_400_000_000_000


class InvalidFormat(ValueError):
    """A string could not be parsed as a duration"""


class CalendarDaysAsExactTime(UserWarning):
    """Calendar days were converted to exact time as if each day had
    exactly 24 hours. This is incorrect across DST transitions,
    where a calendar day may last 23 or 25 hours."""


def check_bounds(months: int, days: int, nanos: int) -> None:
    if not (
        MIN_MONTHS <= months <= MAX_MONTHS
        and MIN_DAYS <= days <= MAX_DAYS
        and MIN_NANOS <= nanos <= MAX_NANOS
    ):
        raise ValueError("Duration out of range")


def parse_err(s: str, reason: str) -> NoReturn:
    raise InvalidFormat(f"Invalid format: {s!r} ({reason})") from None


def trunc_divmod(a: int, b: int) -> tuple[int, int]:
    """divmod() rounding toward zero instead of toward negative infinity.
    The remainder carries the sign of ``a``."""
    q, r = divmod(abs(a), b)
    return (q, r) if a >= 0 else (-q, -r)
