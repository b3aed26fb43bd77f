from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ValidationError

ALL_WEEKDAYS = frozenset(range(7))

_DAY_NAMES = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

# Shorthand day packages used when students enroll.
_PACKAGE_CODES = {
    "mwf": frozenset({0, 2, 4}),
    "tts": frozenset({1, 3, 5}),
}


@dataclass(frozen=True)
class DayPattern:
    """Weekdays on which a student is scheduled (datetime.weekday() numbers)."""

    weekdays: frozenset = ALL_WEEKDAYS

    @classmethod
    def parse(cls, value: Optional[str]) -> "DayPattern":
        """Parse stored day-package text.

        ``"All days"`` means every day, ``"MWF"``/``"TTS"`` are the usual
        three-day packages, anything else is read as a list of day names.
        Empty or unrecognised text is treated as every day.
        """
        if not value or not value.strip():
            return cls()

        text = value.strip().lower()
        if "all days" in text:
            return cls()

        days: set[int] = set()
        for token in re.split(r"[\s,;/|]+", text):
            if not token:
                continue
            if token in _PACKAGE_CODES:
                days |= _PACKAGE_CODES[token]
            elif token in _DAY_NAMES:
                days.add(_DAY_NAMES[token])

        return cls(frozenset(days)) if days else cls()

    def includes(self, day: date) -> bool:
        return day.weekday() in self.weekdays


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student.

    ``teacher_id`` is the nominal assignment and may be stale; pay follows
    observed activity, not this field.
    """

    student_id: int
    name: str
    package: Optional[str]
    teacher_id: Optional[str]
    day_pattern: DayPattern = field(default_factory=DayPattern)
    time_slot: Optional[str] = None
    active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "student_id", require_positive_int(self.student_id, "student_id"))
        object.__setattr__(self, "package", (self.package or "").strip() or None)
        object.__setattr__(self, "teacher_id", (self.teacher_id or "").strip() or None)
        if not isinstance(self.day_pattern, DayPattern):
            raise ValidationError("day_pattern must be a DayPattern")

    def is_scheduled_on(self, day: date) -> bool:
        return self.day_pattern.includes(day)


@dataclass(frozen=True)
class AssignmentPeriod:
    """Historical assignment of a student to a teacher (legacy comparison only)."""

    student_id: int
    teacher_id: str
    start: date
    end: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "student_id", require_positive_int(self.student_id, "student_id"))
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        if self.end is not None and self.end < self.start:
            raise ValidationError("assignment end is before its start")

    def overlap(self, start: date, end: date) -> Optional[tuple[date, date]]:
        lo = max(self.start, start)
        hi = min(self.end, end) if self.end is not None else end
        if lo > hi:
            return None
        return lo, hi
