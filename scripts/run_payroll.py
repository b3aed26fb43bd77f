"""Run the teacher payroll for a period and print one line per teacher.

Usage: python scripts/run_payroll.py [START] [END] [--workers N]
Dates are YYYY-MM-DD; defaults are the first of the current month and today.
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.salary_system.salary_system.common.datetime_utils import parse_iso_date, today_local
from src.salary_system.salary_system.common.money import money_str
from src.salary_system.salary_system.container import build_container


def main() -> int:
    parser = argparse.ArgumentParser(description="Compute teacher salaries for a period.")
    parser.add_argument("start", nargs="?", type=parse_iso_date)
    parser.add_argument("end", nargs="?", type=parse_iso_date)
    parser.add_argument("--workers", type=int, default=None)
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    today = today_local()
    start = args.start or today.replace(day=1)
    end = args.end or today

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    run = container.salary_service.calculate_payroll(start, end, max_workers=args.workers)

    for r in run.results:
        print(
            f"{r.teacher_id:<16} {r.teacher_name:<28} base={money_str(r.base_salary):>10} "
            f"late=-{money_str(r.lateness_deduction):>8} absent=-{money_str(r.absence_deduction):>8} "
            f"bonus=+{money_str(r.bonuses):>8} total={r.total_salary:>8}"
        )
    for f in run.failures:
        print(f"{f.teacher_id:<16} FAILED: {f.error}", file=sys.stderr)
    print(f"Total payroll {start}..{end}: {money_str(run.total_payroll)}")
    return 0 if run.complete else 1


if __name__ == "__main__":
    raise SystemExit(main())
