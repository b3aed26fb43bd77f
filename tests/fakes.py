"""In-memory repositories shared by the test modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from src.salary_system.salary_system.activity.model import ActivityEvent
from src.salary_system.salary_system.core.exceptions import StoreUnavailableError
from src.salary_system.salary_system.rates.model import RateConfiguration
from src.salary_system.salary_system.records.model import AbsenceRecord, BonusRecord, LatenessRecord, Waiver
from src.salary_system.salary_system.students.model import AssignmentPeriod, Student
from src.salary_system.salary_system.teachers.model import Teacher


class FakeTeachersRepo:
    def __init__(self, teachers: Iterable[Teacher] = (), *, broken: Iterable[str] = ()):
        self._items = {t.teacher_id: t for t in teachers}
        self._broken = set(broken)

    def get_by_id(self, teacher_id):
        if teacher_id in self._broken:
            raise StoreUnavailableError(f"connection lost while reading teacher {teacher_id}")
        return self._items.get(teacher_id)

    def list_all(self):
        return sorted(self._items.values(), key=lambda t: t.teacher_id)


class FakeStudentsRepo:
    def __init__(self, students: Iterable[Student] = (), periods: Iterable[AssignmentPeriod] = ()):
        self._items = {s.student_id: s for s in students}
        self._periods = list(periods)

    def list_active_for_teacher(self, teacher_id):
        return [s for s in self._items.values() if s.teacher_id == teacher_id and s.active]

    def get_many(self, student_ids):
        return [self._items[i] for i in sorted(set(student_ids)) if i in self._items]

    def list_assignment_periods(self, *, teacher_id, start, end):
        return [p for p in self._periods if p.teacher_id == teacher_id and p.overlap(start, end) is not None]


class FakeActivityRepo:
    def __init__(self, events: Iterable[ActivityEvent] = ()):
        self.events = list(events)
        self.calls = 0

    def list_for_teacher(self, *, teacher_id, start, end):
        self.calls += 1
        return [e for e in self.events if e.teacher_id == teacher_id and start <= e.day <= end]

    def list_for_students(self, *, student_ids, start, end):
        ids = set(student_ids)
        return [e for e in self.events if e.student_id in ids and start <= e.day <= end]


@dataclass
class FakeRecordsRepo:
    lateness: list[LatenessRecord] = field(default_factory=list)
    absences: list[AbsenceRecord] = field(default_factory=list)
    waivers: list[Waiver] = field(default_factory=list)
    bonuses: list[BonusRecord] = field(default_factory=list)

    def list_lateness(self, *, teacher_id, start, end):
        return [r for r in self.lateness if r.teacher_id == teacher_id and start <= r.class_date <= end]

    def list_absences(self, *, teacher_id, start, end):
        return [r for r in self.absences if r.teacher_id == teacher_id and start <= r.class_date <= end]

    def list_waivers(self, *, teacher_id, start, end):
        return [w for w in self.waivers if w.teacher_id == teacher_id and start <= w.deduction_date <= end]

    def list_bonuses(self, *, teacher_id, start, end):
        return [b for b in self.bonuses if b.teacher_id == teacher_id and start <= b.created_at.date() <= end]


class FakeRatesRepo:
    def __init__(self, rates: Optional[RateConfiguration] = None):
        self.rates = rates or RateConfiguration()
        self.loads = 0

    def load(self):
        self.loads += 1
        return self.rates


class FixedToday:
    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day


class FakeCursor:
    """Returns canned rows chosen by the first table name found in the SQL."""

    def __init__(self, rows_by_table: dict, *, error: Optional[Exception] = None):
        self._rows_by_table = rows_by_table
        self._error = error
        self._rows: list = []
        self.executed: list[tuple[str, tuple]] = []
        self.closed = False

    def execute(self, sql, params=()):
        self.executed.append((sql, tuple(params)))
        if self._error is not None:
            raise self._error
        self._rows = []
        for table, rows in self._rows_by_table.items():
            if f"FROM {table}" in sql:
                self._rows = list(rows)
                break

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, rows_by_table: Optional[dict] = None, *, error: Optional[Exception] = None):
        self.cursor = FakeCursor(rows_by_table or {}, error=error)
        self.connections: list[FakeConnection] = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn
