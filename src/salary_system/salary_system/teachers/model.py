from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import require_non_empty


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher who is paid per taught student."""

    teacher_id: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "teacher_id", require_non_empty(self.teacher_id, "teacher_id"))
        object.__setattr__(self, "name", (self.name or "").strip())
