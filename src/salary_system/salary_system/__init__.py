"""Teacher Salary package.

This package is organized by feature modules (teachers, students, activity,
lateness, absence, payroll, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
