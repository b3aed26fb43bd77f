from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from src.salary_system.salary_system.activity.model import ActivityEvent
from src.salary_system.salary_system.container import build_services
from src.salary_system.salary_system.core.exceptions import StoreUnavailableError
from src.salary_system.salary_system.main import create_app
from src.salary_system.salary_system.rates.model import PackageDeduction, PackageSalary, RateConfiguration
from src.salary_system.salary_system.students.model import AssignmentPeriod, DayPattern, Student
from src.salary_system.salary_system.teachers.model import Teacher
from tests.fakes import FakeActivityRepo, FakeRatesRepo, FakeRecordsRepo, FakeStudentsRepo, FakeTeachersRepo, FixedToday

PERIOD = "start=2025-03-03&end=2025-03-25"


class BrokenActivityRepo(FakeActivityRepo):
    def list_for_teacher(self, *, teacher_id, start, end):
        raise StoreUnavailableError("MySQL server has gone away")


def _container(activity=None):
    student = Student(
        student_id=1,
        name="Amina",
        package="3 days",
        teacher_id="T1",
        day_pattern=DayPattern.parse("MWF"),
        time_slot="16:00",
    )
    days = [3, 4, 5, 7, 10, 11, 12, 14, 17, 19, 21, 24]
    events = [ActivityEvent(teacher_id="T1", student_id=1, occurred_at=datetime(2025, 3, d, 16, 0)) for d in days]
    settings = SimpleNamespace(REST_WEEKDAY=6, SALARY_CACHE_ENABLED=True, SALARY_FAN_OUT=False, PAYROLL_MAX_WORKERS=2)
    return build_services(
        teachers_repo=FakeTeachersRepo([Teacher("T1", "Ustaz Ahmed")]),
        students_repo=FakeStudentsRepo(
            [student], periods=[AssignmentPeriod(student_id=1, teacher_id="T1", start=date(2025, 3, 1))]
        ),
        activity_repo=activity or FakeActivityRepo(events),
        records_repo=FakeRecordsRepo(),
        rates_repo=FakeRatesRepo(
            RateConfiguration.build(
                salaries=[PackageSalary("3 days", 900)],
                deductions=[PackageDeduction("3 days", 30, 25)],
            )
        ),
        settings=settings,
        today_provider=FixedToday(date(2025, 3, 31)),
    )


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(_container())
    return app.test_client()


def test_summary_lists_every_teacher(client):
    resp = client.get(f"/api/teacher-salaries?{PERIOD}")
    assert resp.status_code == 200

    data = resp.get_json()
    assert data["complete"] is True
    assert data["failures"] == []
    assert data["teachers"][0]["teacher_id"] == "T1"
    assert data["teachers"][0]["total_salary"] == "540"
    assert data["total_payroll"] == "540.00"


def test_detail_matches_summary_row(client):
    summary = client.get(f"/api/teacher-salaries?{PERIOD}").get_json()["teachers"][0]
    detail = client.get(f"/api/teacher-salaries/T1?{PERIOD}").get_json()

    assert detail["total_salary"] == summary["total_salary"]
    assert detail["base_salary"] == "540.00"
    assert detail["working_days"] == 20
    assert detail["breakdown"]["students"][0]["days_taught"] == 12


def test_malformed_date_is_a_bad_request(client):
    resp = client.get("/api/teacher-salaries/T1?start=2025-13-01&end=2025-03-25")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_request"


def test_store_failure_is_reported_as_unavailable(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    client = create_app(_container(activity=BrokenActivityRepo())).test_client()

    resp = client.get(f"/api/teacher-salaries/T1?{PERIOD}")
    assert resp.status_code == 503
    assert resp.get_json() == {"error": "store_unavailable"}

    batch = client.get(f"/api/teacher-salaries?{PERIOD}").get_json()
    assert batch["complete"] is False
    assert [f["teacher_id"] for f in batch["failures"]] == ["T1"]


def test_cache_clear_for_one_teacher(client):
    client.get(f"/api/teacher-salaries/T1?{PERIOD}")

    resp = client.post("/api/teacher-salaries/cache/clear", json={"teacher_id": "T1"})
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "teacher_id": "T1", "cleared": 1}


def test_legacy_comparison_endpoint(client):
    resp = client.get(f"/api/teacher-salaries/T1/legacy-comparison?{PERIOD}")
    assert resp.status_code == 200
    assert resp.get_json()["difference"] == "120.00"
