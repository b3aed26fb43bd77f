from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import to_money
from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import DeductionKind
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LatenessRecord:
    """Persisted, already-priced lateness deduction for one teacher/date."""

    teacher_id: str
    class_date: date
    lateness_minutes: int
    deduction_applied: Decimal
    tier: Optional[str] = None
    student_id: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        amount = to_money(self.deduction_applied, "deduction_applied")
        object.__setattr__(self, "deduction_applied", require_non_negative(amount, "deduction_applied"))
        if int(self.lateness_minutes) < 0:
            raise ValidationError("lateness_minutes must not be negative")
        object.__setattr__(self, "lateness_minutes", int(self.lateness_minutes))


@dataclass(frozen=True)
class AbsenceRecord:
    """Persisted, already-priced absence for one teacher/date.

    ``deduction_applied`` already reflects ``permitted`` (usually zero when permitted).
    """

    teacher_id: str
    class_date: date
    permitted: bool
    deduction_applied: Decimal
    note: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        amount = to_money(self.deduction_applied, "deduction_applied")
        object.__setattr__(self, "deduction_applied", require_non_negative(amount, "deduction_applied"))


@dataclass(frozen=True)
class Waiver:
    """Admin override forcing one date's deduction of one kind to zero."""

    teacher_id: str
    deduction_date: date
    kind: DeductionKind
    reason: Optional[str] = None
    admin_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        object.__setattr__(self, "kind", DeductionKind(self.kind))


@dataclass(frozen=True)
class BonusRecord:
    teacher_id: str
    amount: Decimal
    created_at: datetime
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        object.__setattr__(self, "amount", to_money(self.amount, "amount"))
        if not isinstance(self.created_at, datetime):
            raise ValidationError("created_at must be a datetime")


class WaiverIndex:
    """Fast lookup of waived dates per deduction kind."""

    def __init__(self, waivers=()):
        self._by_kind: dict[DeductionKind, dict[date, Waiver]] = {k: {} for k in DeductionKind}
        for w in waivers:
            self._by_kind[w.kind].setdefault(w.deduction_date, w)

    def is_waived(self, kind: DeductionKind, day: date) -> bool:
        return day in self._by_kind[kind]

    def get(self, kind: DeductionKind, day: date) -> Optional[Waiver]:
        return self._by_kind[kind].get(day)
