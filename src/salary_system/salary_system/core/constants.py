"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# datetime.weekday() numbering: Monday=0 ... Sunday=6
DEFAULT_REST_WEEKDAY = 6

DEFAULT_LATENESS_BASE_AMOUNT = 30
DEFAULT_ABSENCE_BASE_AMOUNT = 25
DEFAULT_EXCUSED_THRESHOLD_MINUTES = 0

DEFAULT_PAYROLL_MAX_WORKERS = 4
DEFAULT_EVALUATOR_WORKERS = 3

UNKNOWN_TEACHER_NAME = "Unknown Teacher"
UNKNOWN_STUDENT_NAME = "Unknown Student"
