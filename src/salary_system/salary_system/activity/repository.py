from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Sequence

from .model import ActivityEvent


class ActivityRepository(Protocol):
    def list_for_teacher(self, *, teacher_id: str, start: date, end: date) -> Sequence[ActivityEvent]:
        """Events sent by the teacher with a calendar date in [start, end]."""

        raise NotImplementedError

    def list_for_students(self, *, student_ids: Iterable[int], start: date, end: date) -> Sequence[ActivityEvent]:
        """Events for the students regardless of teacher (legacy comparison)."""

        raise NotImplementedError
