from __future__ import annotations

from decimal import Decimal

from ...rates.model import RateConfiguration
from .base import HUNDRED, LatenessStrategy, TierDecision


class HighestTierStrategy(LatenessStrategy):
    """Outside every tier: charge the largest configured tier percentage."""

    def decide(self, *, minutes: int, base_amount: Decimal, rates: RateConfiguration) -> TierDecision:
        percent = max((t.percent for t in rates.lateness_tiers), default=HUNDRED)
        return TierDecision(deduction=base_amount * percent / HUNDRED, label=f"outside tiers ({percent}%)")
