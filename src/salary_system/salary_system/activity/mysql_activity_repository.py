from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_valid, day_bounds, db_cursor, fetchall, in_clause
from .model import ActivityEvent
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    """Session links sent by teachers, read as join events."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_teacher(self, *, teacher_id: str, start: date, end: date) -> Sequence[ActivityEvent]:
        lo, hi = day_bounds(start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, student_id, sent_time
                FROM session_links
                WHERE teacher_id=%s AND sent_time >= %s AND sent_time < %s
                ORDER BY sent_time
                """,
                (teacher_id, lo, hi),
            )
            return build_valid(fetchall(cur), self._to_event, "session_links")

    def list_for_students(self, *, student_ids: Iterable[int], start: date, end: date) -> Sequence[ActivityEvent]:
        ids = sorted({int(s) for s in student_ids})
        if not ids:
            return []
        lo, hi = day_bounds(start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT teacher_id, student_id, sent_time
                FROM session_links
                WHERE student_id IN ({in_clause(ids)}) AND sent_time >= %s AND sent_time < %s
                ORDER BY sent_time
                """,
                (*ids, lo, hi),
            )
            return build_valid(fetchall(cur), self._to_event, "session_links")

    @staticmethod
    def _to_event(row: dict) -> ActivityEvent:
        return ActivityEvent(
            teacher_id=str(row["teacher_id"]),
            student_id=int(row["student_id"]),
            occurred_at=row["sent_time"],
        )
