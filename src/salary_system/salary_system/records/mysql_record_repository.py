from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_valid, day_bounds, db_cursor, fetchall
from .model import AbsenceRecord, BonusRecord, LatenessRecord, Waiver
from .repository import DeductionRecordRepository


class MySQLDeductionRecordRepository(DeductionRecordRepository):
    """Deduction and bonus rows; a row that fails validation is logged and skipped."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_lateness(self, *, teacher_id: str, start: date, end: date) -> Sequence[LatenessRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, student_id, class_date, lateness_minutes, deduction_applied, deduction_tier
                FROM lateness_records
                WHERE teacher_id=%s AND class_date BETWEEN %s AND %s
                ORDER BY class_date, record_id
                """,
                (teacher_id, start, end),
            )
            return build_valid(fetchall(cur), self._to_lateness, "lateness_records")

    def list_absences(self, *, teacher_id: str, start: date, end: date) -> Sequence[AbsenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, class_date, permitted, deduction_applied, review_notes
                FROM absence_records
                WHERE teacher_id=%s AND class_date BETWEEN %s AND %s
                ORDER BY class_date, record_id
                """,
                (teacher_id, start, end),
            )
            return build_valid(fetchall(cur), self._to_absence, "absence_records")

    def list_waivers(self, *, teacher_id: str, start: date, end: date) -> Sequence[Waiver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, deduction_type, deduction_date, reason, admin_id
                FROM deduction_waivers
                WHERE teacher_id=%s AND deduction_date BETWEEN %s AND %s
                ORDER BY deduction_date
                """,
                (teacher_id, start, end),
            )
            return build_valid(fetchall(cur), self._to_waiver, "deduction_waivers")

    def list_bonuses(self, *, teacher_id: str, start: date, end: date) -> Sequence[BonusRecord]:
        lo, hi = day_bounds(start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, amount, reason, created_at
                FROM bonus_records
                WHERE teacher_id=%s AND created_at >= %s AND created_at < %s
                ORDER BY created_at
                """,
                (teacher_id, lo, hi),
            )
            return build_valid(fetchall(cur), self._to_bonus, "bonus_records")

    @staticmethod
    def _to_lateness(r: dict) -> LatenessRecord:
        return LatenessRecord(
            teacher_id=str(r["teacher_id"]),
            class_date=r["class_date"],
            lateness_minutes=int(r.get("lateness_minutes") or 0),
            deduction_applied=r.get("deduction_applied") or 0,
            tier=r.get("deduction_tier"),
            student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
        )

    @staticmethod
    def _to_absence(r: dict) -> AbsenceRecord:
        return AbsenceRecord(
            teacher_id=str(r["teacher_id"]),
            class_date=r["class_date"],
            permitted=as_bool(r.get("permitted")),
            deduction_applied=r.get("deduction_applied") or 0,
            note=r.get("review_notes"),
        )

    @staticmethod
    def _to_waiver(r: dict) -> Waiver:
        return Waiver(
            teacher_id=str(r["teacher_id"]),
            deduction_date=r["deduction_date"],
            kind=r["deduction_type"],
            reason=r.get("reason"),
            admin_id=r.get("admin_id"),
        )

    @staticmethod
    def _to_bonus(r: dict) -> BonusRecord:
        return BonusRecord(
            teacher_id=str(r["teacher_id"]),
            amount=r["amount"],
            created_at=r["created_at"],
            reason=r.get("reason"),
        )
