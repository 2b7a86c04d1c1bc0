from __future__ import annotations

from ._common import CalendarDaysAsExactTime, InvalidFormat
from ._duration import (
    Duration,
    _unpkl_duration,
    calendar_days,
    calendar_months,
)

__version__ = "0.1.0"

__all__ = [
    "Duration",
    "calendar_days",
    "calendar_months",
    # Exceptions and warnings
    "InvalidFormat",
    "CalendarDaysAsExactTime",
]
