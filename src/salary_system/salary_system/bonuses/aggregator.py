from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from ..common.money import ZERO
from ..records.model import BonusRecord


def bonuses_in_range(teacher_id: str, start: date, end: date, bonuses: Iterable[BonusRecord]) -> list[BonusRecord]:
    """Bonus rows for the teacher created within [start, end], oldest first."""
    rows = [b for b in bonuses if b.teacher_id == teacher_id and start <= b.created_at.date() <= end]
    rows.sort(key=lambda b: b.created_at)
    return rows


def sum_bonuses(teacher_id: str, start: date, end: date, bonuses: Iterable[BonusRecord]) -> Decimal:
    return sum((b.amount for b in bonuses_in_range(teacher_id, start, end, bonuses)), ZERO)
