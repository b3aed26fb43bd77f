"""Price late session starts.

For every day a student was taught, the first join of the day is compared
with the student's scheduled slot. Whole late minutes are priced through the
tier table against the package's lateness base amount.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ..activity.aggregator import ActivityAggregator
from ..common.datetime_utils import parse_time_slot, whole_minutes_between
from ..common.money import ZERO
from ..core.enums import DeductionKind, DeductionSource, WarningCode
from ..payroll.model import CalculationWarning, LatenessItem, WarningLog
from ..rates.model import RateConfiguration
from ..records.model import LatenessRecord, WaiverIndex
from ..students.model import Student
from .factory import LatenessStrategyFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatenessEvaluation:
    items: tuple[LatenessItem, ...]
    warnings: tuple[CalculationWarning, ...] = ()

    @property
    def total(self) -> Decimal:
        return sum((i.deduction for i in self.items), ZERO)


class LatenessEvaluator:
    def __init__(self, *, strategy_factory: Optional[LatenessStrategyFactory] = None):
        self._factory = strategy_factory or LatenessStrategyFactory()

    def evaluate(
        self,
        teacher_id: str,
        start: date,
        end: date,
        *,
        students: Mapping[int, Student],
        activity: ActivityAggregator,
        rates: RateConfiguration,
        lateness_records: Iterable[LatenessRecord] = (),
        waivers: Optional[WaiverIndex] = None,
        today: date,
    ) -> LatenessEvaluation:
        waivers = waivers or WaiverIndex()
        last_day = min(end, today)
        if start > last_day:
            return LatenessEvaluation(items=())

        warnings = WarningLog()
        items: list[LatenessItem] = []

        # A persisted record already prices its student on that date, or the whole
        # date when it names no student; never recompute either.
        recorded_days: set[date] = set()
        recorded_pairs: set[tuple[date, int]] = set()
        for rec in lateness_records:
            if rec.teacher_id != teacher_id or not (start <= rec.class_date <= last_day):
                continue
            if rec.student_id is None:
                recorded_days.add(rec.class_date)
            else:
                recorded_pairs.add((rec.class_date, rec.student_id))
            waived = waivers.is_waived(DeductionKind.LATENESS, rec.class_date)
            items.append(
                LatenessItem(
                    day=rec.class_date,
                    student_id=rec.student_id,
                    late_minutes=rec.lateness_minutes,
                    deduction=ZERO if waived else rec.deduction_applied,
                    source=DeductionSource.RECORDED,
                    tier=rec.tier,
                    waived=waived,
                )
            )

        if rates.lateness_tiers:
            for student_id in sorted(activity.students_taught(teacher_id, start, last_day)):
                items.extend(
                    self._evaluate_student(
                        teacher_id,
                        student_id,
                        start,
                        last_day,
                        student=students.get(student_id),
                        activity=activity,
                        rates=rates,
                        skip_days=recorded_days | {d for d, sid in recorded_pairs if sid == student_id},
                        waivers=waivers,
                        warnings=warnings,
                    )
                )

        items.sort(key=lambda i: (i.day, i.student_id or 0, i.source.value))
        return LatenessEvaluation(items=tuple(items), warnings=warnings.items())

    def _evaluate_student(
        self,
        teacher_id: str,
        student_id: int,
        start: date,
        end: date,
        *,
        student: Optional[Student],
        activity: ActivityAggregator,
        rates: RateConfiguration,
        skip_days: set[date],
        waivers: WaiverIndex,
        warnings: WarningLog,
    ) -> list[LatenessItem]:
        if student is None:
            warnings.add(
                WarningCode.UNKNOWN_STUDENT,
                f"Activity for unknown student {student_id}; lateness not evaluated",
                student_id=student_id,
            )
            return []
        if not student.time_slot:
            return []

        slot = parse_time_slot(student.time_slot)
        if slot is None:
            logger.warning("Unparseable time slot %r for student %s", student.time_slot, student_id)
            warnings.add(
                WarningCode.UNPARSEABLE_TIME_SLOT,
                f"Time slot {student.time_slot!r} could not be parsed; lateness not evaluated",
                student_id=student_id,
            )
            return []

        base_amount, configured = rates.lateness_base_for(student.package)
        out: list[LatenessItem] = []

        for day in sorted(activity.teaching_days_for(teacher_id, student_id, start, end)):
            if day in skip_days:
                continue

            joined_at = activity.first_join(teacher_id, student_id, day)
            scheduled_at = datetime.combine(day, slot)
            minutes = whole_minutes_between(scheduled_at, joined_at)
            if minutes == 0 or minutes <= rates.excused_threshold:
                continue

            decision = self._factory.for_minutes(minutes=minutes, rates=rates).decide(
                minutes=minutes, base_amount=base_amount, rates=rates
            )
            if decision.deduction <= 0:
                continue

            if not configured:
                warnings.add(
                    WarningCode.MISSING_PACKAGE_DEDUCTION,
                    f"No deduction rates for package {student.package!r}; "
                    f"default lateness base {rates.default_lateness_base_amount} used",
                    package=student.package,
                )

            waived = waivers.is_waived(DeductionKind.LATENESS, day)
            out.append(
                LatenessItem(
                    day=day,
                    student_id=student_id,
                    late_minutes=minutes,
                    deduction=ZERO if waived else decision.deduction,
                    source=DeductionSource.COMPUTED,
                    tier=decision.label,
                    package=student.package,
                    scheduled_at=scheduled_at,
                    joined_at=joined_at,
                    waived=waived,
                )
            )
        return out
