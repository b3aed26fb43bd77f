from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, name FROM teachers WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            if not row:
                return None
            return Teacher(teacher_id=str(row["teacher_id"]), name=row.get("name") or "")

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, name FROM teachers ORDER BY teacher_id")
            return [Teacher(teacher_id=str(r["teacher_id"]), name=r.get("name") or "") for r in fetchall(cur)]
