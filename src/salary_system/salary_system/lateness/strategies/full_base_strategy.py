from __future__ import annotations

from decimal import Decimal

from ...rates.model import RateConfiguration
from .base import LatenessStrategy, TierDecision


class FullBaseStrategy(LatenessStrategy):
    """Outside every tier: charge the package's full lateness base."""

    def decide(self, *, minutes: int, base_amount: Decimal, rates: RateConfiguration) -> TierDecision:
        return TierDecision(deduction=base_amount, label="outside tiers (full base)")
