"""Teacher salary orchestration.

Every caller (summary table, single-teacher detail, batch payroll run) goes
through ``SalaryService.calculate_teacher_salary`` so the numbers shown in
different places always come from the same computation.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional

from ..absence.evaluator import AbsenceEvaluation, AbsenceEvaluator
from ..activity.aggregator import ActivityAggregator
from ..activity.model import ActivityEvent
from ..activity.repository import ActivityRepository
from ..bonuses.aggregator import bonuses_in_range, sum_bonuses
from ..common.datetime_utils import today_local
from ..common.money import ZERO, round_currency
from ..core.constants import (
    DEFAULT_EVALUATOR_WORKERS,
    DEFAULT_PAYROLL_MAX_WORKERS,
    DEFAULT_REST_WEEKDAY,
    UNKNOWN_STUDENT_NAME,
    UNKNOWN_TEACHER_NAME,
)
from ..core.enums import WarningCode
from ..core.exceptions import DomainError
from ..lateness.evaluator import LatenessEvaluation, LatenessEvaluator
from ..rates.model import RateConfiguration
from ..rates.repository import RateRepository
from ..records.model import AbsenceRecord, BonusRecord, LatenessRecord, Waiver, WaiverIndex
from ..records.repository import DeductionRecordRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository
from ..workdays.calculator import count_working_days, enumerate_working_days
from .cache import SalaryCache, SalaryCacheKey
from .calculator.activity_calculator import ActivityBasedPayCalculator
from .calculator.base import BasePay, BasePayCalculator
from .model import PayrollFailure, PayrollRun, SalaryResult, WarningLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherSnapshot:
    """All store rows one computation reads, fetched up front."""

    teacher: Optional[Teacher]
    roster: Mapping[int, Student]
    assigned_active: tuple[Student, ...]
    unknown_student_ids: tuple[int, ...]
    events: tuple[ActivityEvent, ...]
    lateness_records: tuple[LatenessRecord, ...]
    absence_records: tuple[AbsenceRecord, ...]
    waivers: tuple[Waiver, ...]
    bonuses: tuple[BonusRecord, ...]


class SalaryService:
    def __init__(
        self,
        teachers: TeacherRepository,
        students: StudentRepository,
        activity: ActivityRepository,
        records: DeductionRecordRepository,
        rates: RateRepository,
        *,
        base_calculator: Optional[BasePayCalculator] = None,
        lateness_evaluator: Optional[LatenessEvaluator] = None,
        absence_evaluator: Optional[AbsenceEvaluator] = None,
        cache: Optional[SalaryCache] = None,
        rest_weekday: int = DEFAULT_REST_WEEKDAY,
        fan_out: bool = False,
        max_workers: int = DEFAULT_PAYROLL_MAX_WORKERS,
        today_provider: Callable[[], date] = today_local,
    ):
        self._teachers = teachers
        self._students = students
        self._activity = activity
        self._records = records
        self._rates = rates
        self._base_calculator = base_calculator or ActivityBasedPayCalculator()
        self._lateness = lateness_evaluator or LatenessEvaluator()
        self._absence = absence_evaluator or AbsenceEvaluator(rest_weekday=rest_weekday)
        self._cache = cache
        self._rest_weekday = int(rest_weekday)
        self._fan_out = bool(fan_out)
        self._max_workers = max(int(max_workers), 1)
        self._today = today_provider

    # -- single operations -------------------------------------------------

    def count_working_days(self, start: date, end: date, include_rest_day: Optional[bool] = None) -> int:
        if include_rest_day is None:
            include_rest_day = self._rates.load().include_rest_day
        return count_working_days(start, end, include_rest_day, rest_weekday=self._rest_weekday)

    def enumerate_working_days(self, start: date, end: date, include_rest_day: Optional[bool] = None) -> list[date]:
        if include_rest_day is None:
            include_rest_day = self._rates.load().include_rest_day
        return enumerate_working_days(start, end, include_rest_day, rest_weekday=self._rest_weekday)

    def teaching_days_for(self, teacher_id: str, student_id: int, start: date, end: date) -> set[date]:
        if start > end:
            return set()
        events = self._activity.list_for_teacher(teacher_id=teacher_id, start=start, end=end)
        return ActivityAggregator(events).teaching_days_for(teacher_id, student_id, start, end)

    def evaluate_lateness(self, teacher_id: str, start: date, end: date) -> LatenessEvaluation:
        rates = self._rates.load()
        snap = self._load_snapshot(teacher_id, start, end)
        return self._evaluate_lateness(snap, teacher_id, start, end, rates, ActivityAggregator(snap.events), self._today())

    def evaluate_absence(
        self, teacher_id: str, start: date, end: date, include_rest_day: Optional[bool] = None
    ) -> AbsenceEvaluation:
        rates = self._rates.load()
        if include_rest_day is None:
            include_rest_day = rates.include_rest_day
        snap = self._load_snapshot(teacher_id, start, end)
        return self._evaluate_absence(
            snap, teacher_id, start, end, include_rest_day, rates, ActivityAggregator(snap.events), self._today()
        )

    def sum_bonuses(self, teacher_id: str, start: date, end: date) -> Decimal:
        if start > end:
            return ZERO
        rows = self._records.list_bonuses(teacher_id=teacher_id, start=start, end=end)
        return sum_bonuses(teacher_id, start, end, rows)

    # -- orchestration -----------------------------------------------------

    def calculate_teacher_salary(self, teacher_id: str, start: date, end: date) -> SalaryResult:
        today = self._today()
        key = SalaryCacheKey(teacher_id=teacher_id, start=start, end=end, as_of=min(end, today))
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Salary cache hit for %s %s..%s", teacher_id, start, end)
                return cached

        rates = self._rates.load()
        snap = self._load_snapshot(teacher_id, start, end)
        result = self._compute(teacher_id, start, end, snap, rates, today)

        if self._cache is not None:
            self._cache.set(key, result)
        return result

    def invalidate_cache(self, teacher_id: Optional[str] = None) -> int:
        """Drop cached results for one teacher, or all of them. Returns how many entries were dropped."""
        if self._cache is None:
            return 0
        if teacher_id:
            return self._cache.invalidate_teacher(teacher_id)
        return self._cache.clear()

    def calculate_payroll(
        self,
        start: date,
        end: date,
        *,
        teacher_ids: Optional[Iterable[str]] = None,
        max_workers: Optional[int] = None,
    ) -> PayrollRun:
        """Compute every teacher independently, at most ``max_workers`` at a time.

        Teachers whose rows cannot be read or fail validation are reported as
        failures, never as zero pay; the rest of the run still completes.
        """
        if teacher_ids is None:
            ids = sorted(t.teacher_id for t in self._teachers.list_all())
        else:
            ids = sorted(set(teacher_ids))

        logger.info("Payroll run %s..%s for %d teachers", start, end, len(ids))
        if not ids:
            return PayrollRun(period_start=start, period_end=end, results=())

        workers = max(1, min(int(max_workers or self._max_workers), len(ids)))
        results: dict[str, SalaryResult] = {}
        failures: list[PayrollFailure] = []

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_teacher = {
                executor.submit(self.calculate_teacher_salary, teacher_id, start, end): teacher_id
                for teacher_id in ids
            }
            for future in as_completed(future_to_teacher):
                teacher_id = future_to_teacher[future]
                try:
                    results[teacher_id] = future.result()
                except DomainError as e:
                    logger.exception("Salary for teacher %s could not be computed", teacher_id)
                    failures.append(PayrollFailure(teacher_id=teacher_id, error=str(e)))

        run = PayrollRun(
            period_start=start,
            period_end=end,
            results=tuple(results[t] for t in ids if t in results),
            failures=tuple(sorted(failures, key=lambda f: f.teacher_id)),
        )
        logger.info("Payroll run finished: %d computed, %d failed", len(run.results), len(run.failures))
        return run

    # -- internals ---------------------------------------------------------

    def _load_snapshot(self, teacher_id: str, start: date, end: date) -> TeacherSnapshot:
        teacher = self._teachers.get_by_id(teacher_id)
        if start > end:
            return TeacherSnapshot(
                teacher=teacher,
                roster={},
                assigned_active=(),
                unknown_student_ids=(),
                events=(),
                lateness_records=(),
                absence_records=(),
                waivers=(),
                bonuses=(),
            )

        assigned = [s for s in self._students.list_active_for_teacher(teacher_id) if s.active]
        events = tuple(self._activity.list_for_teacher(teacher_id=teacher_id, start=start, end=end))

        roster: dict[int, Student] = {s.student_id: s for s in assigned}
        taught_ids = sorted({e.student_id for e in events} - set(roster))
        if taught_ids:
            for s in self._students.get_many(taught_ids):
                roster[s.student_id] = s

        unknown = tuple(sid for sid in taught_ids if sid not in roster)
        for sid in unknown:
            roster[sid] = Student(
                student_id=sid,
                name=UNKNOWN_STUDENT_NAME,
                package=None,
                teacher_id=None,
                active=False,
            )

        return TeacherSnapshot(
            teacher=teacher,
            roster=roster,
            assigned_active=tuple(sorted(assigned, key=lambda s: s.student_id)),
            unknown_student_ids=unknown,
            events=events,
            lateness_records=tuple(self._records.list_lateness(teacher_id=teacher_id, start=start, end=end)),
            absence_records=tuple(self._records.list_absences(teacher_id=teacher_id, start=start, end=end)),
            waivers=tuple(self._records.list_waivers(teacher_id=teacher_id, start=start, end=end)),
            bonuses=tuple(self._records.list_bonuses(teacher_id=teacher_id, start=start, end=end)),
        )

    def _evaluate_lateness(self, snap, teacher_id, start, end, rates, activity, today) -> LatenessEvaluation:
        return self._lateness.evaluate(
            teacher_id,
            start,
            end,
            students=snap.roster,
            activity=activity,
            rates=rates,
            lateness_records=snap.lateness_records,
            waivers=WaiverIndex(snap.waivers),
            today=today,
        )

    def _evaluate_absence(self, snap, teacher_id, start, end, include_rest_day, rates, activity, today) -> AbsenceEvaluation:
        return self._absence.evaluate(
            teacher_id,
            start,
            end,
            include_rest_day,
            roster=snap.assigned_active,
            activity=activity,
            rates=rates,
            absence_records=snap.absence_records,
            waivers=WaiverIndex(snap.waivers),
            today=today,
        )

    def _compute(
        self,
        teacher_id: str,
        start: date,
        end: date,
        snap: TeacherSnapshot,
        rates: RateConfiguration,
        today: date,
    ) -> SalaryResult:
        warnings = WarningLog()
        if snap.teacher is None:
            warnings.add(WarningCode.UNKNOWN_TEACHER, f"Teacher {teacher_id} not found")
        for sid in snap.unknown_student_ids:
            warnings.add(
                WarningCode.UNKNOWN_STUDENT,
                f"Activity for unknown student {sid}; no package to pay from",
                student_id=sid,
            )

        working_days = enumerate_working_days(start, end, rates.include_rest_day, rest_weekday=self._rest_weekday)
        activity = ActivityAggregator(snap.events)

        def base() -> BasePay:
            return self._base_calculator.calculate(
                teacher_id,
                roster=snap.roster,
                activity=activity,
                rates=rates,
                working_days=working_days,
                warnings=warnings,
            )

        def lateness() -> LatenessEvaluation:
            return self._evaluate_lateness(snap, teacher_id, start, end, rates, activity, today)

        def absence() -> AbsenceEvaluation:
            return self._evaluate_absence(snap, teacher_id, start, end, rates.include_rest_day, rates, activity, today)

        if self._fan_out:
            with ThreadPoolExecutor(max_workers=DEFAULT_EVALUATOR_WORKERS) as executor:
                late_future = executor.submit(lateness)
                absence_future = executor.submit(absence)
                base_pay = base()
                late = late_future.result()
                absent = absence_future.result()
        else:
            base_pay = base()
            late = lateness()
            absent = absence()

        bonus_rows = bonuses_in_range(teacher_id, start, end, snap.bonuses)
        bonus_total = sum_bonuses(teacher_id, start, end, bonus_rows)

        warnings.extend(late.warnings)
        warnings.extend(absent.warnings)

        total = round_currency(base_pay.total - late.total - absent.total + bonus_total)
        result = SalaryResult(
            teacher_id=teacher_id,
            teacher_name=snap.teacher.name if snap.teacher else UNKNOWN_TEACHER_NAME,
            period_start=start,
            period_end=end,
            working_days=len(working_days),
            base_salary=base_pay.total,
            lateness_deduction=late.total,
            absence_deduction=absent.total,
            bonuses=bonus_total,
            total_salary=total,
            num_students=len(snap.roster),
            teaching_days=base_pay.teaching_days,
            student_breakdown=base_pay.students,
            daily_earnings=base_pay.daily,
            lateness_breakdown=late.items,
            absence_breakdown=absent.items,
            bonus_breakdown=tuple(bonus_rows),
            warnings=warnings.items(),
        )
        logger.debug(
            "Salary %s %s..%s: base=%s late=%s absent=%s bonus=%s total=%s",
            teacher_id, start, end, result.base_salary, result.lateness_deduction,
            result.absence_deduction, result.bonuses, result.total_salary,
        )
        return result
