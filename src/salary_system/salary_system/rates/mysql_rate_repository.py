from __future__ import annotations

import logging

from ..core.constants import DEFAULT_ABSENCE_BASE_AMOUNT, DEFAULT_LATENESS_BASE_AMOUNT
from ..core.enums import OutOfTierPolicy
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import LatenessTier, PackageDeduction, PackageSalary, RateConfiguration
from .repository import RateRepository

logger = logging.getLogger(__name__)

INCLUDE_REST_DAY_KEY = "include_rest_day_in_salary"
OUT_OF_TIER_POLICY_KEY = "lateness_out_of_tier_policy"
ABSENCE_MONTHS_KEY = "absence_effective_months"
DEFAULT_LATENESS_BASE_KEY = "default_lateness_base_amount"
DEFAULT_ABSENCE_BASE_KEY = "default_absence_base_amount"


def parse_months(value: str) -> frozenset:
    months = set()
    for token in (value or "").replace(";", ",").split(","):
        token = token.strip()
        if token.isdigit() and 1 <= int(token) <= 12:
            months.add(int(token))
    return frozenset(months)


class MySQLRateRepository(RateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> RateConfiguration:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT package_name, salary_per_student FROM package_salaries")
            salaries = [
                PackageSalary(package_name=r["package_name"], salary_per_student=r["salary_per_student"])
                for r in fetchall(cur)
            ]

            cur.execute("SELECT package_name, lateness_base_amount, absence_base_amount FROM package_deductions")
            deductions = [
                PackageDeduction(
                    package_name=r["package_name"],
                    lateness_base_amount=r["lateness_base_amount"],
                    absence_base_amount=r["absence_base_amount"],
                )
                for r in fetchall(cur)
            ]

            cur.execute(
                """
                SELECT start_minute, end_minute, deduction_percent, excused_threshold
                FROM lateness_deduction_tiers
                ORDER BY start_minute
                """
            )
            tier_rows = fetchall(cur)

            cur.execute("SELECT `key`, `value` FROM settings")
            settings = {r["key"]: r["value"] for r in fetchall(cur)}

        tiers = [
            LatenessTier(start_minute=r["start_minute"], end_minute=r["end_minute"], percent=r["deduction_percent"])
            for r in tier_rows
        ]
        excused = min((int(r.get("excused_threshold") or 0) for r in tier_rows), default=0)

        policy_text = settings.get(OUT_OF_TIER_POLICY_KEY, OutOfTierPolicy.FULL_BASE.value)
        try:
            policy = OutOfTierPolicy(policy_text)
        except ValueError:
            logger.warning("Unknown out-of-tier policy %r in settings; using %s", policy_text, OutOfTierPolicy.FULL_BASE.value)
            policy = OutOfTierPolicy.FULL_BASE

        return RateConfiguration.build(
            salaries=salaries,
            deductions=deductions,
            include_rest_day=as_bool(settings.get(INCLUDE_REST_DAY_KEY, "false")),
            lateness_tiers=tiers,
            excused_threshold=excused,
            out_of_tier_policy=policy,
            absence_effective_months=parse_months(settings.get(ABSENCE_MONTHS_KEY, "")),
            default_lateness_base_amount=settings.get(DEFAULT_LATENESS_BASE_KEY, DEFAULT_LATENESS_BASE_AMOUNT),
            default_absence_base_amount=settings.get(DEFAULT_ABSENCE_BASE_KEY, DEFAULT_ABSENCE_BASE_AMOUNT),
        )
