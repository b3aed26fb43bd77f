from datetime import date

from src.salary_system.salary_system.workdays.calculator import (
    count_working_days,
    enumerate_working_days,
    is_working_day,
)


def test_rest_day_excluded_by_default_flag():
    # 2025-03-03 is a Monday; Sundays in range are 9, 16 and 23.
    assert count_working_days(date(2025, 3, 3), date(2025, 3, 25), False) == 20


def test_rest_day_included_counts_every_calendar_day():
    assert count_working_days(date(2025, 3, 3), date(2025, 3, 25), True) == 23


def test_full_month_without_rest_days():
    assert count_working_days(date(2025, 3, 1), date(2025, 3, 31), False) == 26


def test_enumerate_is_ordered_and_skips_sunday():
    days = enumerate_working_days(date(2025, 3, 7), date(2025, 3, 11), False)
    assert days == [date(2025, 3, 7), date(2025, 3, 8), date(2025, 3, 10), date(2025, 3, 11)]


def test_reversed_range_is_empty():
    assert enumerate_working_days(date(2025, 3, 10), date(2025, 3, 1), False) == []
    assert count_working_days(date(2025, 3, 10), date(2025, 3, 1), True) == 0


def test_single_day_range():
    assert count_working_days(date(2025, 3, 9), date(2025, 3, 9), False) == 0
    assert count_working_days(date(2025, 3, 9), date(2025, 3, 9), True) == 1


def test_custom_rest_weekday():
    # Friday as the rest day
    assert not is_working_day(date(2025, 3, 7), False, rest_weekday=4)
    assert is_working_day(date(2025, 3, 9), False, rest_weekday=4)
    assert count_working_days(date(2025, 3, 3), date(2025, 3, 9), False, rest_weekday=4) == 6
