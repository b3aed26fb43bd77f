from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence

from ...activity.aggregator import ActivityAggregator
from ...rates.model import RateConfiguration
from ...students.model import Student
from ..model import DailyEarning, StudentEarning, WarningLog


@dataclass(frozen=True)
class BasePay:
    students: tuple[StudentEarning, ...]
    daily: tuple[DailyEarning, ...]
    total: Decimal
    teaching_days: int


class BasePayCalculator(ABC):
    """Calculator interface (Strategy Pattern for base pay)."""

    @abstractmethod
    def calculate(
        self,
        teacher_id: str,
        *,
        roster: Mapping[int, Student],
        activity: ActivityAggregator,
        rates: RateConfiguration,
        working_days: Sequence[date],
        warnings: WarningLog,
    ) -> BasePay:
        raise NotImplementedError
