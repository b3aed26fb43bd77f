from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ...rates.model import RateConfiguration

HUNDRED = Decimal(100)


@dataclass(frozen=True)
class TierDecision:
    deduction: Decimal
    label: str


class LatenessStrategy(ABC):
    """Strategy Pattern: encapsulate how a late session is priced."""

    @abstractmethod
    def decide(self, *, minutes: int, base_amount: Decimal, rates: RateConfiguration) -> TierDecision:
        raise NotImplementedError
