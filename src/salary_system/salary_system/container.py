from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .absence.evaluator import AbsenceEvaluator
from .activity.mysql_activity_repository import MySQLActivityRepository
from .activity.repository import ActivityRepository
from .core.constants import DEFAULT_PAYROLL_MAX_WORKERS, DEFAULT_REST_WEEKDAY
from .database.connection import DBConfig, DatabaseConnection
from .lateness.evaluator import LatenessEvaluator
from .lateness.factory import LatenessStrategyFactory
from .payroll.cache import InMemorySalaryCache, SalaryCache
from .payroll.legacy_comparison import LegacyAssignmentComparison
from .payroll.service import SalaryService
from .rates.mysql_rate_repository import MySQLRateRepository
from .rates.repository import RateRepository
from .records.mysql_record_repository import MySQLDeductionRecordRepository
from .records.repository import DeductionRecordRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    activity_repo: ActivityRepository
    records_repo: DeductionRecordRepository
    rates_repo: RateRepository

    salary_cache: Optional[SalaryCache]
    salary_service: SalaryService
    legacy_comparison: LegacyAssignmentComparison


def build_services(
    *,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    activity_repo: ActivityRepository,
    records_repo: DeductionRecordRepository,
    rates_repo: RateRepository,
    settings: Any = None,
    conn: Optional[DatabaseConnection] = None,
    **service_kwargs,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    rest_weekday = int(getattr(settings, "REST_WEEKDAY", DEFAULT_REST_WEEKDAY))
    cache = InMemorySalaryCache() if bool(getattr(settings, "SALARY_CACHE_ENABLED", False)) else None

    salary_service = SalaryService(
        teachers_repo,
        students_repo,
        activity_repo,
        records_repo,
        rates_repo,
        lateness_evaluator=LatenessEvaluator(strategy_factory=LatenessStrategyFactory()),
        absence_evaluator=AbsenceEvaluator(rest_weekday=rest_weekday),
        cache=cache,
        rest_weekday=rest_weekday,
        fan_out=bool(getattr(settings, "SALARY_FAN_OUT", False)),
        max_workers=int(getattr(settings, "PAYROLL_MAX_WORKERS", DEFAULT_PAYROLL_MAX_WORKERS)),
        **service_kwargs,
    )
    legacy_comparison = LegacyAssignmentComparison(
        students_repo, activity_repo, rates_repo, rest_weekday=rest_weekday
    )

    return Container(
        conn=conn,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        activity_repo=activity_repo,
        records_repo=records_repo,
        rates_repo=rates_repo,
        salary_cache=cache,
        salary_service=salary_service,
        legacy_comparison=legacy_comparison,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        activity_repo=MySQLActivityRepository(conn),
        records_repo=MySQLDeductionRecordRepository(conn),
        rates_repo=MySQLRateRepository(conn),
        settings=settings,
        conn=conn,
    )
