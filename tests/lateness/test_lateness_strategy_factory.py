from decimal import Decimal

from src.salary_system.salary_system.core.enums import OutOfTierPolicy
from src.salary_system.salary_system.lateness.factory import LatenessStrategyFactory
from src.salary_system.salary_system.lateness.strategies.full_base_strategy import FullBaseStrategy
from src.salary_system.salary_system.lateness.strategies.highest_tier_strategy import HighestTierStrategy
from src.salary_system.salary_system.lateness.strategies.no_deduction_strategy import NoDeductionStrategy
from src.salary_system.salary_system.lateness.strategies.tier_strategy import MatchedTierStrategy
from src.salary_system.salary_system.rates.model import LatenessTier, RateConfiguration


def _rates(policy=OutOfTierPolicy.FULL_BASE):
    return RateConfiguration(
        lateness_tiers=[LatenessTier(16, 30, 20), LatenessTier(6, 15, 10)],
        out_of_tier_policy=policy,
    )


def test_factory_picks_matching_tier():
    f = LatenessStrategyFactory()
    strategy = f.for_minutes(minutes=20, rates=_rates())
    assert isinstance(strategy, MatchedTierStrategy)
    assert strategy.tier.percent == Decimal("20")


def test_factory_falls_back_to_policy():
    f = LatenessStrategyFactory()
    assert isinstance(f.for_minutes(minutes=3, rates=_rates()), FullBaseStrategy)
    assert isinstance(f.for_minutes(minutes=90, rates=_rates(OutOfTierPolicy.NO_DEDUCTION)), NoDeductionStrategy)
    assert isinstance(f.for_minutes(minutes=90, rates=_rates(OutOfTierPolicy.HIGHEST_TIER)), HighestTierStrategy)


def test_tiers_are_sorted_on_load():
    rates = _rates()
    assert [t.start_minute for t in rates.lateness_tiers] == [6, 16]
