from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AbsenceRecord, BonusRecord, LatenessRecord, Waiver


class DeductionRecordRepository(Protocol):
    """Read access to admin-entered rows for one teacher and date range."""

    def list_lateness(self, *, teacher_id: str, start: date, end: date) -> Sequence[LatenessRecord]:
        raise NotImplementedError

    def list_absences(self, *, teacher_id: str, start: date, end: date) -> Sequence[AbsenceRecord]:
        raise NotImplementedError

    def list_waivers(self, *, teacher_id: str, start: date, end: date) -> Sequence[Waiver]:
        raise NotImplementedError

    def list_bonuses(self, *, teacher_id: str, start: date, end: date) -> Sequence[BonusRecord]:
        """Bonuses whose created_at date lies in [start, end]."""

        raise NotImplementedError
