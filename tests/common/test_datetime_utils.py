from datetime import datetime, time

from src.salary_system.salary_system.common.datetime_utils import parse_time_slot, whole_minutes_between


def test_parse_time_slot_formats():
    assert parse_time_slot("08:30") == time(8, 30)
    assert parse_time_slot("08:30:15") == time(8, 30, 15)
    assert parse_time_slot("12:15 AM") == time(0, 15)
    assert parse_time_slot("12:15 pm") == time(12, 15)
    assert parse_time_slot("16:00-17:00") == time(16, 0)


def test_parse_time_slot_rejects_garbage():
    assert parse_time_slot(None) is None
    assert parse_time_slot("") is None
    assert parse_time_slot("25:00") is None
    assert parse_time_slot("13:00 PM") is None
    assert parse_time_slot("evening") is None


def test_whole_minutes_round_half_up_and_never_negative():
    scheduled = datetime(2025, 3, 5, 16, 0)
    assert whole_minutes_between(scheduled, datetime(2025, 3, 5, 16, 9, 29)) == 9
    assert whole_minutes_between(scheduled, datetime(2025, 3, 5, 16, 8, 40)) == 9
    assert whole_minutes_between(scheduled, datetime(2025, 3, 5, 16, 0, 30)) == 1
    assert whole_minutes_between(scheduled, datetime(2025, 3, 5, 15, 59, 50)) == 0
    assert whole_minutes_between(scheduled, datetime(2025, 3, 5, 15, 50)) == 0
