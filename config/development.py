import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "salary_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# datetime.weekday() number of the weekly rest day (6 = Sunday)
REST_WEEKDAY = int(os.getenv("REST_WEEKDAY", "6"))

PAYROLL_MAX_WORKERS = int(os.getenv("PAYROLL_MAX_WORKERS", "4"))
SALARY_FAN_OUT = bool(int(os.getenv("SALARY_FAN_OUT", "0")))
SALARY_CACHE_ENABLED = bool(int(os.getenv("SALARY_CACHE_ENABLED", "1")))
