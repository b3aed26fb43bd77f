from __future__ import annotations

from decimal import Decimal

from ...rates.model import LatenessTier, RateConfiguration
from .base import HUNDRED, LatenessStrategy, TierDecision


class MatchedTierStrategy(LatenessStrategy):
    """Minutes fall inside a configured tier: charge that tier's percentage."""

    def __init__(self, tier: LatenessTier):
        self.tier = tier

    def decide(self, *, minutes: int, base_amount: Decimal, rates: RateConfiguration) -> TierDecision:
        return TierDecision(deduction=base_amount * self.tier.percent / HUNDRED, label=self.tier.label)
