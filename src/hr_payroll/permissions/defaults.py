from __future__ import annotations

from ..core.enums import PermissionAction as A
from ..core.enums import Role

DASHBOARD = "Dashboard"
EMPLOYEES = "Employees"
ATTENDANCE = "Attendance"
TIME_OFF = "Time Off"
PAYROLL = "Payroll"
REPORTS = "Reports"
SETTINGS = "Settings"

MODULES = (DASHBOARD, EMPLOYEES, ATTENDANCE, TIME_OFF, PAYROLL, REPORTS, SETTINGS)

DEFAULT_ROLE_PERMISSIONS: dict[Role, dict[str, list[A]]] = {
    Role.EMPLOYEE: {
        ATTENDANCE: [A.VIEW, A.CREATE],
        TIME_OFF: [A.VIEW, A.CREATE],
        PAYROLL: [A.VIEW],
    },
    Role.HR_OFFICER: {
        DASHBOARD: [A.VIEW, A.EXPORT],
        EMPLOYEES: [A.VIEW, A.CREATE, A.EDIT, A.EXPORT],
        ATTENDANCE: [A.VIEW, A.CREATE, A.EDIT, A.APPROVE, A.EXPORT],
        TIME_OFF: [A.VIEW, A.CREATE, A.EDIT, A.APPROVE, A.EXPORT],
        PAYROLL: [A.VIEW],
        REPORTS: [A.VIEW, A.EXPORT],
        SETTINGS: [A.VIEW],
    },
    Role.PAYROLL_OFFICER: {
        DASHBOARD: [A.VIEW, A.EXPORT],
        EMPLOYEES: [A.VIEW, A.EXPORT],
        ATTENDANCE: [A.VIEW, A.EXPORT],
        TIME_OFF: [A.VIEW, A.EXPORT],
        PAYROLL: [A.VIEW, A.CREATE, A.EDIT, A.PROCESS, A.EXPORT],
        REPORTS: [A.VIEW, A.EXPORT],
        SETTINGS: [A.VIEW],
    },
    Role.ADMIN: {
        DASHBOARD: [A.VIEW, A.EXPORT],
        EMPLOYEES: [A.VIEW, A.CREATE, A.EDIT, A.DELETE, A.EXPORT],
        ATTENDANCE: [A.VIEW, A.CREATE, A.EDIT, A.DELETE, A.APPROVE, A.EXPORT],
        TIME_OFF: [A.VIEW, A.CREATE, A.EDIT, A.DELETE, A.APPROVE, A.EXPORT],
        PAYROLL: [A.VIEW, A.CREATE, A.EDIT, A.DELETE, A.PROCESS, A.EXPORT],
        REPORTS: [A.VIEW, A.EXPORT],
        SETTINGS: [A.VIEW, A.EDIT],
    },
}
