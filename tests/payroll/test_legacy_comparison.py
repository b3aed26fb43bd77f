from datetime import date, datetime
from decimal import Decimal

from src.salary_system.salary_system.activity.model import ActivityEvent
from src.salary_system.salary_system.payroll.legacy_comparison import LegacyAssignmentComparison
from src.salary_system.salary_system.payroll.service import SalaryService
from src.salary_system.salary_system.rates.model import PackageSalary, RateConfiguration
from src.salary_system.salary_system.students.model import AssignmentPeriod, DayPattern, Student
from src.salary_system.salary_system.teachers.model import Teacher
from tests.fakes import FakeActivityRepo, FakeRatesRepo, FakeRecordsRepo, FakeStudentsRepo, FakeTeachersRepo, FixedToday

START = date(2025, 3, 3)
END = date(2025, 3, 25)


def _setup():
    student = Student(
        student_id=1, name="Amina", package="3 days", teacher_id="T1", day_pattern=DayPattern.parse("MWF")
    )
    students = FakeStudentsRepo([student], periods=[AssignmentPeriod(student_id=1, teacher_id="T1", start=date(2025, 3, 1))])
    days = [3, 4, 5, 7, 10, 11, 12, 14, 17, 19, 21, 24]
    activity = FakeActivityRepo(
        [ActivityEvent(teacher_id="T1", student_id=1, occurred_at=datetime(2025, 3, d, 16, 0)) for d in days]
    )
    rates = FakeRatesRepo(RateConfiguration.build(salaries=[PackageSalary("3 days", 900)]))
    service = SalaryService(
        FakeTeachersRepo([Teacher("T1", "Ustaz Ahmed")]),
        students,
        activity,
        FakeRecordsRepo(),
        rates,
        today_provider=FixedToday(date(2025, 3, 31)),
    )
    return service, LegacyAssignmentComparison(students, activity, rates), activity


def test_legacy_rule_divides_by_whole_month_and_rounds_daily_rate():
    service, comparison, _ = _setup()
    report = comparison.compare(service.calculate_teacher_salary("T1", START, END))

    # 26 working days in March; round(900 / 26) = 35 per day.
    assert report.legacy_base_salary == Decimal("420")
    assert report.current_base_salary == Decimal("540")
    assert report.difference == Decimal("120")
    assert [s.student_id for s in report.diverging_students] == [1]
    assert report.to_dict()["difference"] == "120.00"


def test_legacy_rule_counts_sessions_taught_by_anyone():
    service, comparison, activity = _setup()
    activity.events.append(ActivityEvent(teacher_id="T2", student_id=1, occurred_at=datetime(2025, 3, 6, 16, 0)))

    legacy = comparison.legacy_base_salary("T1", START, END)
    assert legacy[1] == (13, Decimal("455"))


def test_no_assignment_history_means_nothing_to_compare():
    _, comparison, _ = _setup()
    assert comparison.legacy_base_salary("T2", START, END) == {}
