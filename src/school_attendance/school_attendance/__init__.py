"""School Attendance package.

This package is organized by feature modules (attendance, fraud, settings, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
