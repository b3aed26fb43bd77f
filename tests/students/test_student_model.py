from datetime import date, timedelta

import pytest

from src.salary_system.salary_system.core.exceptions import ValidationError
from src.salary_system.salary_system.students.model import AssignmentPeriod, DayPattern, Student
from src.salary_system.salary_system.students.mysql_student_repository import MySQLStudentRepository
from tests.fakes import FakeConnectionFactory


def test_day_pattern_codes_and_names():
    assert DayPattern.parse("MWF").weekdays == frozenset({0, 2, 4})
    assert DayPattern.parse("TTS").weekdays == frozenset({1, 3, 5})
    assert DayPattern.parse("All days").weekdays == frozenset(range(7))
    assert DayPattern.parse("Mon, Thursday").weekdays == frozenset({0, 3})
    assert DayPattern.parse(None).weekdays == frozenset(range(7))


def test_student_requires_positive_id():
    with pytest.raises(ValidationError):
        Student(student_id=0, name="X", package="3 days", teacher_id="T1")


def test_assignment_period_overlap():
    period = AssignmentPeriod(student_id=1, teacher_id="T1", start=date(2025, 3, 10), end=date(2025, 3, 20))
    assert period.overlap(date(2025, 3, 1), date(2025, 3, 31)) == (date(2025, 3, 10), date(2025, 3, 20))
    assert period.overlap(date(2025, 4, 1), date(2025, 4, 30)) is None


def test_mysql_rows_map_to_students():
    factory = FakeConnectionFactory(
        {
            "students": [
                {
                    "student_id": 7,
                    "name": "Bilal",
                    "package": "3 days",
                    "teacher_id": "T1",
                    "day_package": "TTS",
                    "time_slot": timedelta(hours=9, minutes=30),
                    "status": "Active",
                },
                {
                    "student_id": 8,
                    "name": "Sara",
                    "package": None,
                    "teacher_id": "T1",
                    "day_package": "",
                    "time_slot": "4:00 PM",
                    "status": "Leave",
                },
            ]
        }
    )
    bilal, sara = MySQLStudentRepository(factory).get_many([8, 7])

    assert bilal.time_slot == "09:30"
    assert bilal.day_pattern.weekdays == frozenset({1, 3, 5})
    assert bilal.active is True
    assert sara.package is None
    assert sara.active is False
    assert factory.cursor.executed[0][1] == (7, 8)
