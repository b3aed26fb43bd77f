"""Reconstruct who taught whom on which day from session-join events.

Events are the ground truth for teaching. A student's nominal teacher
assignment drifts (substitutions, hand-offs), so pay follows the teacher who
actually generated the activity.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from .model import ActivityEvent


class ActivityAggregator:
    def __init__(self, events: Iterable[ActivityEvent] = ()):
        # (teacher_id, student_id) -> day -> earliest join on that day
        self._first_join: dict[tuple[str, int], dict[date, datetime]] = defaultdict(dict)
        self._counts: dict[tuple[str, int], int] = defaultdict(int)

        for ev in events:
            key = (ev.teacher_id, ev.student_id)
            self._counts[key] += 1
            day = ev.day
            current = self._first_join[key].get(day)
            if current is None or ev.occurred_at < current:
                self._first_join[key][day] = ev.occurred_at

    def teaching_days_for(self, teacher_id: str, student_id: int, start: date, end: date) -> set[date]:
        days = self._first_join.get((teacher_id, student_id), {})
        return {d for d in days if start <= d <= end}

    def first_join(self, teacher_id: str, student_id: int, day: date) -> Optional[datetime]:
        return self._first_join.get((teacher_id, student_id), {}).get(day)

    def students_taught(self, teacher_id: str, start: date, end: date) -> set[int]:
        return {
            student_id
            for (t_id, student_id), days in self._first_join.items()
            if t_id == teacher_id and any(start <= d <= end for d in days)
        }

    def active_dates(self, teacher_id: str, start: date, end: date) -> set[date]:
        """Days on which the teacher joined a session with any student."""
        out: set[date] = set()
        for (t_id, _), days in self._first_join.items():
            if t_id == teacher_id:
                out.update(d for d in days if start <= d <= end)
        return out

    def event_count(self, teacher_id: str, student_id: int) -> int:
        return self._counts.get((teacher_id, student_id), 0)
