from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.money import to_money
from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import (
    DEFAULT_ABSENCE_BASE_AMOUNT,
    DEFAULT_EXCUSED_THRESHOLD_MINUTES,
    DEFAULT_LATENESS_BASE_AMOUNT,
)
from ..core.enums import OutOfTierPolicy
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PackageSalary:
    """Monthly pay per student enrolled in a package."""

    package_name: str
    salary_per_student: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "package_name", require_non_empty(self.package_name, "package_name"))
        amount = to_money(self.salary_per_student, "salary_per_student")
        object.__setattr__(self, "salary_per_student", require_non_negative(amount, "salary_per_student"))


@dataclass(frozen=True)
class PackageDeduction:
    """Base amounts that lateness tiers and absences are priced from."""

    package_name: str
    lateness_base_amount: Decimal
    absence_base_amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "package_name", require_non_empty(self.package_name, "package_name"))
        for name in ("lateness_base_amount", "absence_base_amount"):
            amount = to_money(getattr(self, name), name)
            object.__setattr__(self, name, require_non_negative(amount, name))


@dataclass(frozen=True)
class LatenessTier:
    """Inclusive minute range mapped to a percentage of the lateness base."""

    start_minute: int
    end_minute: int
    percent: Decimal

    def __post_init__(self) -> None:
        if int(self.start_minute) < 0 or int(self.end_minute) < int(self.start_minute):
            raise ValidationError(f"invalid lateness tier range {self.start_minute}-{self.end_minute}")
        percent = to_money(self.percent, "percent")
        if percent < 0 or percent > 100:
            raise ValidationError("tier percent must be between 0 and 100")
        object.__setattr__(self, "start_minute", int(self.start_minute))
        object.__setattr__(self, "end_minute", int(self.end_minute))
        object.__setattr__(self, "percent", percent)

    def contains(self, minutes: int) -> bool:
        return self.start_minute <= minutes <= self.end_minute

    @property
    def label(self) -> str:
        return f"{self.start_minute}-{self.end_minute} min ({self.percent}%)"


@dataclass(frozen=True)
class RateConfiguration:
    """Everything the engine reads from configuration, loaded once per invocation."""

    package_salaries: Mapping[str, PackageSalary] = field(default_factory=dict)
    package_deductions: Mapping[str, PackageDeduction] = field(default_factory=dict)
    include_rest_day: bool = False
    lateness_tiers: Sequence[LatenessTier] = ()
    excused_threshold: int = DEFAULT_EXCUSED_THRESHOLD_MINUTES
    out_of_tier_policy: OutOfTierPolicy = OutOfTierPolicy.FULL_BASE
    absence_effective_months: frozenset = frozenset()
    default_lateness_base_amount: Decimal = Decimal(DEFAULT_LATENESS_BASE_AMOUNT)
    default_absence_base_amount: Decimal = Decimal(DEFAULT_ABSENCE_BASE_AMOUNT)

    def __post_init__(self) -> None:
        tiers = tuple(sorted(self.lateness_tiers, key=lambda t: (t.start_minute, t.end_minute)))
        for prev, cur in zip(tiers, tiers[1:]):
            if cur.start_minute <= prev.end_minute:
                raise ValidationError(f"lateness tiers overlap: {prev.label} and {cur.label}")
        object.__setattr__(self, "lateness_tiers", tiers)
        object.__setattr__(self, "out_of_tier_policy", OutOfTierPolicy(self.out_of_tier_policy))
        object.__setattr__(self, "absence_effective_months", frozenset(int(m) for m in self.absence_effective_months))
        object.__setattr__(self, "default_lateness_base_amount", to_money(self.default_lateness_base_amount))
        object.__setattr__(self, "default_absence_base_amount", to_money(self.default_absence_base_amount))
        if int(self.excused_threshold) < 0:
            raise ValidationError("excused_threshold must not be negative")

    @classmethod
    def build(
        cls,
        *,
        salaries: Sequence[PackageSalary] = (),
        deductions: Sequence[PackageDeduction] = (),
        **kwargs,
    ) -> "RateConfiguration":
        return cls(
            package_salaries={s.package_name: s for s in salaries},
            package_deductions={d.package_name: d for d in deductions},
            **kwargs,
        )

    def salary_for(self, package: Optional[str]) -> Optional[Decimal]:
        """Monthly rate, or None when the package has no salary configured."""
        if not package or package not in self.package_salaries:
            return None
        return self.package_salaries[package].salary_per_student

    def lateness_base_for(self, package: Optional[str]) -> tuple[Decimal, bool]:
        """(amount, configured). Falls back to the default base when not configured."""
        pkg = self.package_deductions.get(package or "")
        if pkg is None:
            return self.default_lateness_base_amount, False
        return pkg.lateness_base_amount, True

    def absence_base_for(self, package: Optional[str]) -> tuple[Decimal, bool]:
        pkg = self.package_deductions.get(package or "")
        if pkg is None:
            return self.default_absence_base_amount, False
        return pkg.absence_base_amount, True

    def find_tier(self, minutes: int) -> Optional[LatenessTier]:
        for tier in self.lateness_tiers:
            if tier.contains(minutes):
                return tier
        return None

    def absence_applies_in_month(self, month: int) -> bool:
        return not self.absence_effective_months or month in self.absence_effective_months
