from __future__ import annotations

from enum import Enum


class DeductionKind(str, Enum):
    """Kind of deduction a waiver can cancel."""

    LATENESS = "lateness"
    ABSENCE = "absence"


class DeductionSource(str, Enum):
    """Where a deduction line came from."""

    RECORDED = "recorded"
    COMPUTED = "computed"


class OutOfTierPolicy(str, Enum):
    """What to charge when lateness minutes fall outside every tier."""

    FULL_BASE = "full_base"
    NO_DEDUCTION = "no_deduction"
    HIGHEST_TIER = "highest_tier"


class WarningCode(str, Enum):
    """Non-fatal data-quality problems surfaced in a salary breakdown."""

    MISSING_PACKAGE_SALARY = "MISSING_PACKAGE_SALARY"
    MISSING_PACKAGE_DEDUCTION = "MISSING_PACKAGE_DEDUCTION"
    UNPARSEABLE_TIME_SLOT = "UNPARSEABLE_TIME_SLOT"
    UNKNOWN_STUDENT = "UNKNOWN_STUDENT"
    UNKNOWN_TEACHER = "UNKNOWN_TEACHER"
