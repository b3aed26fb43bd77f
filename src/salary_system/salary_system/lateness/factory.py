from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import OutOfTierPolicy
from ..rates.model import RateConfiguration
from .strategies.base import LatenessStrategy
from .strategies.full_base_strategy import FullBaseStrategy
from .strategies.highest_tier_strategy import HighestTierStrategy
from .strategies.no_deduction_strategy import NoDeductionStrategy
from .strategies.tier_strategy import MatchedTierStrategy


@dataclass
class LatenessStrategyFactory:
    """Factory Pattern: choose how to price a late session from the tier table."""

    def for_minutes(self, *, minutes: int, rates: RateConfiguration) -> LatenessStrategy:
        tier = rates.find_tier(minutes)
        if tier is not None:
            return MatchedTierStrategy(tier)
        return self.for_policy(rates.out_of_tier_policy)

    def for_policy(self, policy: OutOfTierPolicy) -> LatenessStrategy:
        if policy == OutOfTierPolicy.NO_DEDUCTION:
            return NoDeductionStrategy()
        if policy == OutOfTierPolicy.HIGHEST_TIER:
            return HighestTierStrategy()
        return FullBaseStrategy()
