from __future__ import annotations

from datetime import date
from typing import Iterable

from ..common.datetime_utils import iter_days, month_bounds


def count_working_days(year: int, month: int, holidays: Iterable[date] = ()) -> int:
    """Days of the month that are neither Saturday, Sunday nor a holiday."""
    first, last = month_bounds(year, month)
    off = set(holidays)
    return sum(1 for day in iter_days(first, last) if day.weekday() < 5 and day not in off)
