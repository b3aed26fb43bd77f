"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the salary rules live in SalaryService.
"""

import importlib

from config import get_settings_module

from src.salary_system.salary_system.container import build_container
from src.salary_system.salary_system.common.datetime_utils import today_local


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    today = today_local()
    result = container.salary_service.calculate_teacher_salary("T001", today.replace(day=1), today)
    print(result.summary_row())


if __name__ == "__main__":
    main()
