from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence

from ...activity.aggregator import ActivityAggregator
from ...common.money import ZERO
from ...core.enums import WarningCode
from ...rates.model import RateConfiguration
from ...students.model import Student
from ..model import DailyEarning, StudentEarning, WarningLog
from .base import BasePay, BasePayCalculator


class ActivityBasedPayCalculator(BasePayCalculator):
    """Standard rule: monthly rate / working days, times days actually taught.

    Only teaching days that are working days are paid, so a full month of
    teaching never exceeds the monthly rate.
    """

    def calculate(
        self,
        teacher_id: str,
        *,
        roster: Mapping[int, Student],
        activity: ActivityAggregator,
        rates: RateConfiguration,
        working_days: Sequence[date],
        warnings: WarningLog,
    ) -> BasePay:
        if not working_days:
            return BasePay(students=(), daily=(), total=ZERO, teaching_days=0)

        start, end = working_days[0], working_days[-1]
        payable = set(working_days)
        day_count = len(working_days)

        per_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
        all_days: set[date] = set()
        earnings: list[StudentEarning] = []

        for student_id in sorted(roster):
            student = roster[student_id]
            days = activity.teaching_days_for(teacher_id, student_id, start, end) & payable
            all_days |= days
            mismatch = student.teacher_id != teacher_id

            monthly = rates.salary_for(student.package)
            if monthly is None:
                warnings.add(
                    WarningCode.MISSING_PACKAGE_SALARY,
                    f"No salary configured for package {student.package!r}; student excluded from base pay",
                    package=student.package,
                    student_id=student_id,
                )
                earnings.append(
                    StudentEarning(
                        student_id=student_id,
                        student_name=student.name,
                        package=student.package,
                        monthly_rate=ZERO,
                        daily_rate=ZERO,
                        days_taught=len(days),
                        earned=ZERO,
                        assignment_mismatch=mismatch,
                        missing_configuration=True,
                    )
                )
                continue

            daily_rate = monthly / day_count
            for d in days:
                per_day[d] += daily_rate

            earnings.append(
                StudentEarning(
                    student_id=student_id,
                    student_name=student.name,
                    package=student.package,
                    monthly_rate=monthly,
                    daily_rate=daily_rate,
                    days_taught=len(days),
                    earned=daily_rate * len(days),
                    assignment_mismatch=mismatch,
                )
            )

        return BasePay(
            students=tuple(earnings),
            daily=tuple(DailyEarning(day=d, amount=per_day[d]) for d in sorted(per_day)),
            total=sum((e.earned for e in earnings), ZERO),
            teaching_days=len(all_days),
        )
