"""Attendance Engine package.

Organized by feature modules (imports, attendance, worktime, settlement, leave, ...)
with a thin Flask controller layer on top of service/repository layers.
"""
