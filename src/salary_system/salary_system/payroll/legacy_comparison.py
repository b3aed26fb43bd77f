"""Side-by-side check of the retired assignment-history pay rule.

The old rule paid a teacher for the students assigned to them (per the
assignment history), counting every session those students had inside the
assignment window no matter who taught it. It also divided by the working
days of the whole calendar month and rounded the daily rate to a whole unit.

This module only reports differences against a ``SalaryResult``; it is not
used to compute pay.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..activity.repository import ActivityRepository
from ..common.money import ZERO, money_str, round_currency
from ..core.constants import DEFAULT_REST_WEEKDAY
from ..rates.repository import RateRepository
from ..students.repository import StudentRepository
from ..workdays.calculator import count_working_days, is_working_day
from .model import SalaryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentComparison:
    student_id: int
    legacy_days: int
    legacy_earned: Decimal
    current_days: int
    current_earned: Decimal

    @property
    def difference(self) -> Decimal:
        return self.current_earned - self.legacy_earned


@dataclass(frozen=True)
class ComparisonReport:
    teacher_id: str
    legacy_base_salary: Decimal
    current_base_salary: Decimal
    students: tuple[StudentComparison, ...]

    @property
    def difference(self) -> Decimal:
        return self.current_base_salary - self.legacy_base_salary

    @property
    def diverging_students(self) -> tuple[StudentComparison, ...]:
        return tuple(s for s in self.students if s.difference != 0 or s.legacy_days != s.current_days)

    def to_dict(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "legacy_base_salary": money_str(self.legacy_base_salary),
            "current_base_salary": money_str(self.current_base_salary),
            "difference": money_str(self.difference),
            "students": [
                {
                    "student_id": s.student_id,
                    "legacy_days": s.legacy_days,
                    "legacy_earned": money_str(s.legacy_earned),
                    "current_days": s.current_days,
                    "current_earned": money_str(s.current_earned),
                    "difference": money_str(s.difference),
                }
                for s in self.diverging_students
            ],
        }


class LegacyAssignmentComparison:
    def __init__(
        self,
        students: StudentRepository,
        activity: ActivityRepository,
        rates: RateRepository,
        *,
        rest_weekday: int = DEFAULT_REST_WEEKDAY,
    ):
        self._students = students
        self._activity = activity
        self._rates = rates
        self._rest_weekday = rest_weekday

    def legacy_base_salary(self, teacher_id: str, start: date, end: date) -> dict[int, tuple[int, Decimal]]:
        """student_id -> (days, earned) under the assignment-history rule."""
        if start > end:
            return {}

        rates = self._rates.load()
        periods = self._students.list_assignment_periods(teacher_id=teacher_id, start=start, end=end)
        if not periods:
            return {}

        month_end = date(start.year, start.month, calendar.monthrange(start.year, start.month)[1])
        month_days = count_working_days(
            date(start.year, start.month, 1), month_end, rates.include_rest_day, rest_weekday=self._rest_weekday
        )

        student_ids = sorted({p.student_id for p in periods})
        students = {s.student_id: s for s in self._students.get_many(student_ids)}
        events = self._activity.list_for_students(student_ids=student_ids, start=start, end=end)

        # Legacy rule ignores who taught: every teacher's sessions count.
        days_by_student: dict[int, set[date]] = {sid: set() for sid in student_ids}
        for ev in events:
            days_by_student.setdefault(ev.student_id, set()).add(ev.day)

        out: dict[int, tuple[int, Decimal]] = {}
        for period in periods:
            window = period.overlap(start, end)
            student = students.get(period.student_id)
            if window is None or student is None:
                continue
            monthly = rates.salary_for(student.package)
            if monthly is None or month_days == 0:
                continue

            lo, hi = window
            days = {
                d
                for d in days_by_student.get(period.student_id, set())
                if lo <= d <= hi and is_working_day(d, rates.include_rest_day, rest_weekday=self._rest_weekday)
            }
            daily_rate = round_currency(round_currency(monthly) / month_days)
            prev_days, prev_earned = out.get(period.student_id, (0, ZERO))
            out[period.student_id] = (prev_days + len(days), prev_earned + daily_rate * len(days))
        return out

    def compare(self, current: SalaryResult) -> ComparisonReport:
        legacy = self.legacy_base_salary(current.teacher_id, current.period_start, current.period_end)
        current_by_student = {s.student_id: s for s in current.student_breakdown}

        rows = []
        for sid in sorted(set(legacy) | set(current_by_student)):
            legacy_days, legacy_earned = legacy.get(sid, (0, ZERO))
            cur = current_by_student.get(sid)
            rows.append(
                StudentComparison(
                    student_id=sid,
                    legacy_days=legacy_days,
                    legacy_earned=legacy_earned,
                    current_days=cur.days_taught if cur else 0,
                    current_earned=cur.earned if cur else ZERO,
                )
            )

        report = ComparisonReport(
            teacher_id=current.teacher_id,
            legacy_base_salary=sum((e for _, e in legacy.values()), ZERO),
            current_base_salary=current.base_salary,
            students=tuple(rows),
        )
        if report.difference != 0:
            logger.info(
                "Legacy pay rule differs for teacher %s by %s (%d students)",
                current.teacher_id, money_str(report.difference), len(report.diverging_students),
            )
        return report
