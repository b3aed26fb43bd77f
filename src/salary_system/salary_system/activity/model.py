from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ActivityEvent:
    """A session-join event: proof that a teacher taught a student.

    ``occurred_at`` is naive local time as stored.
    """

    teacher_id: str
    student_id: int
    occurred_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        object.__setattr__(self, "student_id", require_positive_int(self.student_id, "student_id"))
        if not isinstance(self.occurred_at, datetime):
            raise ValidationError("occurred_at must be a datetime")

    @property
    def day(self) -> date:
        return self.occurred_at.date()
