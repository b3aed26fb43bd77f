from datetime import date, datetime
from decimal import Decimal

from src.salary_system.salary_system.records.mysql_record_repository import MySQLDeductionRecordRepository
from tests.fakes import FakeConnectionFactory

START = date(2025, 3, 1)
END = date(2025, 3, 31)


def test_invalid_absence_row_is_skipped_and_the_rest_kept(caplog):
    factory = FakeConnectionFactory(
        {
            "absence_records": [
                {"teacher_id": "T2", "class_date": date(2025, 3, 5), "permitted": 0, "deduction_applied": Decimal("-5")},
                {"teacher_id": "T2", "class_date": date(2025, 3, 7), "permitted": 1, "deduction_applied": Decimal("25")},
            ]
        }
    )

    with caplog.at_level("WARNING"):
        rows = MySQLDeductionRecordRepository(factory).list_absences(teacher_id="T2", start=START, end=END)

    assert [(r.class_date, r.deduction_applied, r.permitted) for r in rows] == [(date(2025, 3, 7), Decimal("25"), True)]
    assert "Skipping invalid absence_records row" in caplog.text
    assert factory.connections[0].closed is True


def test_unknown_waiver_kind_is_skipped():
    factory = FakeConnectionFactory(
        {
            "deduction_waivers": [
                {"teacher_id": "T1", "deduction_type": "holiday", "deduction_date": date(2025, 3, 5)},
                {"teacher_id": "T1", "deduction_type": "lateness", "deduction_date": date(2025, 3, 6), "reason": "traffic"},
            ]
        }
    )

    rows = MySQLDeductionRecordRepository(factory).list_waivers(teacher_id="T1", start=START, end=END)

    assert [(w.deduction_date, w.reason) for w in rows] == [(date(2025, 3, 6), "traffic")]


def test_bonus_rows_are_read_within_day_bounds():
    factory = FakeConnectionFactory(
        {"bonus_records": [{"teacher_id": "T1", "amount": Decimal("100"), "created_at": datetime(2025, 3, 10, 9, 0)}]}
    )

    rows = MySQLDeductionRecordRepository(factory).list_bonuses(teacher_id="T1", start=START, end=END)

    assert [b.amount for b in rows] == [Decimal("100")]
    _, params = factory.cursor.executed[0]
    assert params == ("T1", "2025-03-01 00:00:00", "2025-04-01 00:00:00")
