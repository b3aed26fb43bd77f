"""Working-day arithmetic for salary periods.

A working day is a calendar day that counts toward the denominator of the
daily-rate calculation. The weekly rest day only counts when
``include_rest_day`` is true.
"""
from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_days
from ..core.constants import DEFAULT_REST_WEEKDAY


def is_working_day(day: date, include_rest_day: bool, *, rest_weekday: int = DEFAULT_REST_WEEKDAY) -> bool:
    return include_rest_day or day.weekday() != rest_weekday


def enumerate_working_days(
    start: date,
    end: date,
    include_rest_day: bool,
    *,
    rest_weekday: int = DEFAULT_REST_WEEKDAY,
) -> list[date]:
    """Ordered working dates in ``[start, end]``; empty when start > end."""
    return [d for d in iter_days(start, end) if is_working_day(d, include_rest_day, rest_weekday=rest_weekday)]


def count_working_days(
    start: date,
    end: date,
    include_rest_day: bool,
    *,
    rest_weekday: int = DEFAULT_REST_WEEKDAY,
) -> int:
    return len(enumerate_working_days(start, end, include_rest_day, rest_weekday=rest_weekday))
