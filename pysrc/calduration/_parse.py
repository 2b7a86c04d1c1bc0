"""Single-pass parsing of ISO 8601 durations"""

from ._common import parse_err

# Designators in the order they may appear. 'M' occurs twice:
# its meaning depends on whether the 'T' separator has been seen.
_UNITS = "YMWDHMS"
_UNIT_NAMES = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
)
_SECONDS = 6
_FIRST_TIME_UNIT = 4

_is_digit = "0123456789".__contains__
_is_decimal_sep = ".,".__contains__

# years, months, weeks, days, hours, minutes, seconds, nanoseconds
Components = tuple[int, int, int, int, int, int, int, int]


def duration_from_iso(s: str) -> Components:
    """Scan an ISO 8601 duration like ``P3Y6M4DT12H30M5.5S`` into its
    components. The string is read once, left to right, without
    backtracking or slicing.

    Only the seconds may be fractional. Fraction digits beyond
    nanosecond precision are truncated.
    """
    if not s.startswith("P"):
        parse_err(s, "must start with 'P'")

    totals = [0, 0, 0, 0, 0, 0, 0]
    nanos = 0
    in_time = False
    last_unit = -1

    # accumulators for the number currently being read
    whole = 0
    frac = 0
    frac_digits = 0
    in_fraction = False
    has_digits = False

    for i in range(1, len(s)):
        c = s[i]
        if last_unit == _SECONDS:
            parse_err(s, f"unexpected {c!r} at position {i} after seconds")

        if _is_digit(c):
            if in_fraction:
                frac_digits += 1
                if frac_digits <= 9:
                    frac = frac * 10 + ord(c) - 48
            else:
                whole = whole * 10 + ord(c) - 48
                has_digits = True
        elif _is_decimal_sep(c):
            if in_fraction:
                parse_err(s, "multiple decimal points in a number")
            elif not has_digits:
                parse_err(s, f"missing digits before {c!r} at position {i}")
            in_fraction = True
        elif c == "T":
            if in_time:
                parse_err(s, f"duplicate 'T' at position {i}")
            elif has_digits:
                parse_err(s, f"number without designator before position {i}")
            in_time = True
        elif c in _UNITS:
            if c == "M":
                unit = 5 if in_time else 1
            else:
                unit = _UNITS.index(c)

            if in_time and unit < _FIRST_TIME_UNIT:
                parse_err(s, f"{c!r} at position {i} is only valid before 'T'")
            elif not in_time and unit >= _FIRST_TIME_UNIT:
                parse_err(s, f"{c!r} at position {i} is only valid after 'T'")
            elif not has_digits:
                parse_err(s, f"missing value before {c!r} at position {i}")
            elif in_fraction:
                if unit != _SECONDS:
                    parse_err(s, f"fractional {_UNIT_NAMES[unit]} not allowed")
                elif not frac_digits:
                    parse_err(s, "missing digits after decimal point")
                nanos = frac * 10 ** (9 - min(frac_digits, 9))
            if unit <= last_unit:
                parse_err(s, f"{c!r} at position {i} is out of order")

            totals[unit] = whole
            last_unit = unit
            # a number never carries over into the next designator
            whole = frac = frac_digits = 0
            in_fraction = has_digits = False
        else:
            parse_err(s, f"invalid character {c!r} at position {i}")

    if has_digits:
        parse_err(s, "number without designator at end")
    elif in_time and last_unit < _FIRST_TIME_UNIT:
        parse_err(s, "no time components after 'T'")

    years, months, weeks, days, hours, minutes, seconds = totals
    return (years, months, weeks, days, hours, minutes, seconds, nanos)
