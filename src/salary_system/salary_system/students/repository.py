from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Sequence

from .model import AssignmentPeriod, Student


class StudentRepository(Protocol):
    def list_active_for_teacher(self, teacher_id: str) -> Sequence[Student]:
        """Active students whose current assignment is this teacher."""

        raise NotImplementedError

    def get_many(self, student_ids: Iterable[int]) -> Sequence[Student]:
        raise NotImplementedError

    def list_assignment_periods(self, *, teacher_id: str, start: date, end: date) -> Sequence[AssignmentPeriod]:
        """Assignment history rows overlapping the range (legacy comparison)."""

        raise NotImplementedError
