from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO, money_str
from ..core.enums import DeductionSource, WarningCode


@dataclass(frozen=True)
class CalculationWarning:
    """Non-fatal data-quality problem found while computing a salary."""

    code: WarningCode
    message: str
    package: Optional[str] = None
    student_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "package": self.package,
            "student_id": self.student_id,
        }


@dataclass(frozen=True)
class StudentEarning:
    student_id: int
    student_name: str
    package: Optional[str]
    monthly_rate: Decimal
    daily_rate: Decimal
    days_taught: int
    earned: Decimal
    assignment_mismatch: bool = False
    missing_configuration: bool = False

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "package": self.package,
            "monthly_rate": money_str(self.monthly_rate),
            "daily_rate": money_str(self.daily_rate),
            "days_taught": self.days_taught,
            "earned": money_str(self.earned),
            "assignment_mismatch": self.assignment_mismatch,
            "missing_configuration": self.missing_configuration,
        }


@dataclass(frozen=True)
class DailyEarning:
    day: date
    amount: Decimal

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "amount": money_str(self.amount)}


@dataclass(frozen=True)
class LatenessItem:
    """One lateness charge (or waived charge) for a date."""

    day: date
    student_id: Optional[int]
    late_minutes: int
    deduction: Decimal
    source: DeductionSource
    tier: Optional[str] = None
    package: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    joined_at: Optional[datetime] = None
    waived: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "student_id": self.student_id,
            "late_minutes": self.late_minutes,
            "deduction": money_str(self.deduction),
            "source": self.source.value,
            "tier": self.tier,
            "package": self.package,
            "scheduled_time": self.scheduled_at.strftime("%H:%M") if self.scheduled_at else None,
            "actual_time": self.joined_at.strftime("%H:%M") if self.joined_at else None,
            "waived": self.waived,
        }


@dataclass(frozen=True)
class PackageCharge:
    """Students of one package missed on a computed-absence day."""

    package: Optional[str]
    student_count: int
    rate: Decimal
    configured: bool = True

    @property
    def amount(self) -> Decimal:
        return self.rate * self.student_count


@dataclass(frozen=True)
class AbsenceItem:
    day: date
    source: DeductionSource
    deduction: Decimal
    waived: bool = False
    permitted: Optional[bool] = None
    charges: tuple[PackageCharge, ...] = ()
    note: Optional[str] = None

    @property
    def affected_students(self) -> int:
        return sum(c.student_count for c in self.charges)

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "source": self.source.value,
            "deduction": money_str(self.deduction),
            "waived": self.waived,
            "permitted": self.permitted,
            "affected_students": self.affected_students,
            "packages": [
                {
                    "package": c.package,
                    "students": c.student_count,
                    "rate": money_str(c.rate),
                    "configured": c.configured,
                }
                for c in self.charges
            ],
            "note": self.note,
        }


@dataclass(frozen=True)
class SalaryResult:
    """Per-teacher salary for a period plus everything needed to audit it.

    Sub-totals are exact sums of their breakdown lines; only ``total_salary``
    is rounded to a whole currency unit.
    """

    teacher_id: str
    teacher_name: str
    period_start: date
    period_end: date
    working_days: int
    base_salary: Decimal
    lateness_deduction: Decimal
    absence_deduction: Decimal
    bonuses: Decimal
    total_salary: Decimal
    num_students: int
    teaching_days: int
    student_breakdown: tuple[StudentEarning, ...] = ()
    daily_earnings: tuple[DailyEarning, ...] = ()
    lateness_breakdown: tuple[LatenessItem, ...] = ()
    absence_breakdown: tuple[AbsenceItem, ...] = ()
    bonus_breakdown: tuple = ()
    warnings: tuple[CalculationWarning, ...] = field(default=())

    @property
    def total_deductions(self) -> Decimal:
        return self.lateness_deduction + self.absence_deduction

    @property
    def average_daily_earning(self) -> Decimal:
        if self.teaching_days == 0:
            return ZERO
        return self.base_salary / self.teaching_days

    def deductions_by_date(self) -> dict[date, Decimal]:
        out: dict[date, Decimal] = defaultdict(lambda: ZERO)
        for item in self.lateness_breakdown:
            out[item.day] += item.deduction
        for item in self.absence_breakdown:
            out[item.day] += item.deduction
        return dict(sorted(out.items()))

    def summary_row(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "base_salary": money_str(self.base_salary),
            "lateness_deduction": money_str(self.lateness_deduction),
            "absence_deduction": money_str(self.absence_deduction),
            "bonuses": money_str(self.bonuses),
            "total_salary": str(self.total_salary),
            "num_students": self.num_students,
            "teaching_days": self.teaching_days,
            "warnings": len(self.warnings),
        }

    def to_dict(self) -> dict:
        row = self.summary_row()
        row.update(
            {
                "period_start": self.period_start.isoformat(),
                "period_end": self.period_end.isoformat(),
                "working_days": self.working_days,
                "breakdown": {
                    "students": [s.to_dict() for s in self.student_breakdown],
                    "daily_earnings": [d.to_dict() for d in self.daily_earnings],
                    "lateness": [i.to_dict() for i in self.lateness_breakdown],
                    "absence": [i.to_dict() for i in self.absence_breakdown],
                    "bonuses": [
                        {
                            "amount": money_str(b.amount),
                            "created_at": b.created_at.isoformat(),
                            "reason": b.reason,
                        }
                        for b in self.bonus_breakdown
                    ],
                    "summary": {
                        "working_days": self.working_days,
                        "teaching_days": self.teaching_days,
                        "average_daily_earning": money_str(self.average_daily_earning),
                        "total_deductions": money_str(self.total_deductions),
                        "net_salary": str(self.total_salary),
                    },
                },
                "warnings": [w.to_dict() for w in self.warnings],
            }
        )
        return row


@dataclass(frozen=True)
class PayrollFailure:
    teacher_id: str
    error: str


@dataclass(frozen=True)
class PayrollRun:
    """Outcome of a batch run: computed results and teachers that could not be computed."""

    period_start: date
    period_end: date
    results: tuple[SalaryResult, ...]
    failures: tuple[PayrollFailure, ...] = ()

    @property
    def total_payroll(self) -> Decimal:
        return sum((r.total_salary for r in self.results), ZERO)

    @property
    def complete(self) -> bool:
        return not self.failures


class WarningLog:
    """Collects warnings for one computation, once per (code, package, student)."""

    def __init__(self):
        self._items: dict[tuple, CalculationWarning] = {}

    def add(self, code: WarningCode, message: str, *, package: Optional[str] = None, student_id: Optional[int] = None) -> None:
        key = (code, package, student_id)
        if key not in self._items:
            self._items[key] = CalculationWarning(code=code, message=message, package=package, student_id=student_id)

    def extend(self, warnings) -> None:
        for w in warnings:
            self.add(w.code, w.message, package=w.package, student_id=w.student_id)

    def items(self) -> tuple[CalculationWarning, ...]:
        return tuple(
            sorted(self._items.values(), key=lambda w: (w.code.value, w.package or "", w.student_id or 0))
        )
