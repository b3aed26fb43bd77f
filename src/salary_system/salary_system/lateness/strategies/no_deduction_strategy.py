from __future__ import annotations

from decimal import Decimal

from ...common.money import ZERO
from ...rates.model import RateConfiguration
from .base import LatenessStrategy, TierDecision


class NoDeductionStrategy(LatenessStrategy):
    """Outside every tier: do not charge."""

    def decide(self, *, minutes: int, base_amount: Decimal, rates: RateConfiguration) -> TierDecision:
        return TierDecision(deduction=ZERO, label="outside tiers (not charged)")
