"""Absence deductions: recorded absences first, then inferred ones.

Reconciliation order for every date in the period:

1. Persisted absence records are charged as recorded (zero when waived) and
   the date is considered decided.
2. Any other working day on which the teacher joined no session at all, while
   having active students scheduled that weekday, is a computed absence.
   Every scheduled student counts: the day is charged per package as
   ``absence_base(package) * students_in_package``.
3. Waived computed days are still reported, with a zero amount.

Dates after ``today`` are never evaluated.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..activity.aggregator import ActivityAggregator
from ..common.money import ZERO
from ..core.constants import DEFAULT_REST_WEEKDAY
from ..core.enums import DeductionKind, DeductionSource, WarningCode
from ..payroll.model import AbsenceItem, CalculationWarning, PackageCharge, WarningLog
from ..rates.model import RateConfiguration
from ..records.model import AbsenceRecord, WaiverIndex
from ..students.model import Student
from ..workdays.calculator import enumerate_working_days


@dataclass(frozen=True)
class AbsenceEvaluation:
    items: tuple[AbsenceItem, ...]
    warnings: tuple[CalculationWarning, ...] = ()

    @property
    def total(self) -> Decimal:
        return sum((i.deduction for i in self.items), ZERO)

    @property
    def decided_days(self) -> set[date]:
        return {i.day for i in self.items}


class AbsenceEvaluator:
    def __init__(self, *, rest_weekday: int = DEFAULT_REST_WEEKDAY):
        self._rest_weekday = rest_weekday

    def evaluate(
        self,
        teacher_id: str,
        start: date,
        end: date,
        include_rest_day: bool,
        *,
        roster: Sequence[Student],
        activity: ActivityAggregator,
        rates: RateConfiguration,
        absence_records: Iterable[AbsenceRecord] = (),
        waivers: Optional[WaiverIndex] = None,
        today: date,
    ) -> AbsenceEvaluation:
        waivers = waivers or WaiverIndex()
        last_day = min(end, today)
        if start > last_day:
            return AbsenceEvaluation(items=())

        warnings = WarningLog()
        items: list[AbsenceItem] = []

        decided: set[date] = set()
        for rec in absence_records:
            if rec.teacher_id != teacher_id or not (start <= rec.class_date <= last_day):
                continue
            decided.add(rec.class_date)
            waived = waivers.is_waived(DeductionKind.ABSENCE, rec.class_date)
            items.append(
                AbsenceItem(
                    day=rec.class_date,
                    source=DeductionSource.RECORDED,
                    deduction=ZERO if waived else rec.deduction_applied,
                    waived=waived,
                    permitted=rec.permitted,
                    note=rec.note,
                )
            )

        active = [s for s in roster if s.active]
        if active:
            taught_days = activity.active_dates(teacher_id, start, last_day)
            working_days = enumerate_working_days(start, last_day, include_rest_day, rest_weekday=self._rest_weekday)
            for day in working_days:
                if day in decided or day in taught_days:
                    continue
                if not rates.absence_applies_in_month(day.month):
                    continue

                scheduled = [s for s in active if s.is_scheduled_on(day)]
                if not scheduled:
                    continue

                charges = self._package_charges(scheduled, rates, warnings)
                amount = sum((c.amount for c in charges), ZERO)
                waived = waivers.is_waived(DeductionKind.ABSENCE, day)
                items.append(
                    AbsenceItem(
                        day=day,
                        source=DeductionSource.COMPUTED,
                        deduction=ZERO if waived else amount,
                        waived=waived,
                        charges=charges,
                        note=f"No session activity ({len(scheduled)} scheduled students)",
                    )
                )

        items.sort(key=lambda i: (i.day, i.source.value))
        return AbsenceEvaluation(items=tuple(items), warnings=warnings.items())

    def _package_charges(
        self, students: Sequence[Student], rates: RateConfiguration, warnings: WarningLog
    ) -> tuple[PackageCharge, ...]:
        counts = Counter(s.package for s in students)
        charges: list[PackageCharge] = []
        for package in sorted(counts, key=lambda p: p or ""):
            rate, configured = rates.absence_base_for(package)
            if not configured:
                warnings.add(
                    WarningCode.MISSING_PACKAGE_DEDUCTION,
                    f"No deduction rates for package {package!r}; "
                    f"default absence base {rates.default_absence_base_amount} used",
                    package=package,
                )
            charges.append(PackageCharge(package=package, student_count=counts[package], rate=rate, configured=configured))
        return tuple(charges)
