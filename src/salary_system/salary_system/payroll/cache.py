from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

from .model import SalaryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryCacheKey:
    """``as_of`` is min(end, today); a period still open gets a new key each day."""

    teacher_id: str
    start: date
    end: date
    as_of: Optional[date] = None


class SalaryCache(Protocol):
    def get(self, key: SalaryCacheKey) -> Optional[SalaryResult]:
        raise NotImplementedError

    def set(self, key: SalaryCacheKey, result: SalaryResult) -> None:
        raise NotImplementedError

    def invalidate(self, key: SalaryCacheKey) -> None:
        raise NotImplementedError

    def invalidate_teacher(self, teacher_id: str) -> int:
        """Drop every cached period for a teacher; returns how many entries went."""

        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError


class InMemorySalaryCache:
    """Process-local cache owned by whoever builds the service (app container, tests)."""

    def __init__(self):
        self._items: dict[SalaryCacheKey, SalaryResult] = {}
        self._lock = threading.Lock()

    def get(self, key: SalaryCacheKey) -> Optional[SalaryResult]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: SalaryCacheKey, result: SalaryResult) -> None:
        with self._lock:
            self._items[key] = result

    def invalidate(self, key: SalaryCacheKey) -> None:
        with self._lock:
            self._items.pop(key, None)

    def invalidate_teacher(self, teacher_id: str) -> int:
        with self._lock:
            keys = [k for k in self._items if k.teacher_id == teacher_id]
            for k in keys:
                del self._items[k]
        logger.info("Salary cache cleared for teacher %s (%d entries)", teacher_id, len(keys))
        return len(keys)

    def clear(self) -> int:
        with self._lock:
            dropped = len(self._items)
            self._items.clear()
        logger.info("Salary cache cleared (%d entries)", dropped)
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
