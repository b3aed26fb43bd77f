from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, slot_text
from .model import AssignmentPeriod, DayPattern, Student
from .repository import StudentRepository

_ACTIVE_STATUSES = ("active", "not yet")

_STUDENT_COLUMNS = "student_id, name, package, teacher_id, day_package, time_slot, status"


def _to_student(row: dict) -> Student:
    status = (row.get("status") or "").strip().lower()
    return Student(
        student_id=int(row["student_id"]),
        name=row.get("name") or "",
        package=row.get("package"),
        teacher_id=row.get("teacher_id"),
        day_pattern=DayPattern.parse(row.get("day_package")),
        time_slot=slot_text(row.get("time_slot")),
        active=status in _ACTIVE_STATUSES,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_for_teacher(self, teacher_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students
                WHERE teacher_id=%s AND LOWER(status) IN ({in_clause(_ACTIVE_STATUSES)})
                ORDER BY student_id
                """,
                (teacher_id, *_ACTIVE_STATUSES),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_many(self, student_ids: Iterable[int]) -> Sequence[Student]:
        ids = sorted({int(s) for s in student_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_id IN ({in_clause(ids)}) ORDER BY student_id",
                tuple(ids),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def list_assignment_periods(self, *, teacher_id: str, start: date, end: date) -> Sequence[AssignmentPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, teacher_id, start_date, end_date
                FROM teacher_assignments
                WHERE teacher_id=%s
                  AND start_date <= %s
                  AND (end_date IS NULL OR end_date >= %s)
                ORDER BY student_id, start_date
                """,
                (teacher_id, end, start),
            )
            return [
                AssignmentPeriod(
                    student_id=int(r["student_id"]),
                    teacher_id=str(r["teacher_id"]),
                    start=r["start_date"],
                    end=r.get("end_date"),
                )
                for r in fetchall(cur)
            ]
