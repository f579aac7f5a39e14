"""HR payroll package.

Organized by feature modules (sessions, attendance, leaves, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
