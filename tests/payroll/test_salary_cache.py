from datetime import date
from decimal import Decimal

from src.salary_system.salary_system.payroll.cache import InMemorySalaryCache, SalaryCacheKey
from src.salary_system.salary_system.payroll.model import SalaryResult


def _result(teacher_id: str) -> SalaryResult:
    return SalaryResult(
        teacher_id=teacher_id,
        teacher_name=teacher_id,
        period_start=date(2025, 3, 1),
        period_end=date(2025, 3, 31),
        working_days=26,
        base_salary=Decimal("0"),
        lateness_deduction=Decimal("0"),
        absence_deduction=Decimal("0"),
        bonuses=Decimal("0"),
        total_salary=Decimal("0"),
        num_students=0,
        teaching_days=0,
    )


def test_cache_invalidates_per_teacher_and_clears():
    cache = InMemorySalaryCache()
    march = SalaryCacheKey("T1", date(2025, 3, 1), date(2025, 3, 31))
    april = SalaryCacheKey("T1", date(2025, 4, 1), date(2025, 4, 30))
    other = SalaryCacheKey("T2", date(2025, 3, 1), date(2025, 3, 31))
    for key in (march, april, other):
        cache.set(key, _result(key.teacher_id))

    assert cache.get(march).teacher_id == "T1"
    assert cache.invalidate_teacher("T1") == 2
    assert cache.get(march) is None
    assert len(cache) == 1

    cache.invalidate(other)
    assert cache.get(other) is None
    assert cache.clear() == 0
