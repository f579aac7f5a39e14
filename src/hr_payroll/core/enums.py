from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role used for authorization."""

    ADMIN = "ADMIN"
    HR_OFFICER = "HR_OFFICER"
    PAYROLL_OFFICER = "PAYROLL_OFFICER"
    EMPLOYEE = "EMPLOYEE"


class EmploymentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"


class DayStatus(str, Enum):
    """Status derived for one calendar day from its work sessions."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    LATE = "LATE"


class LeaveType(str, Enum):
    PAID_TIME_OFF = "PAID_TIME_OFF"
    SICK_LEAVE = "SICK_LEAVE"
    UNPAID_LEAVE = "UNPAID_LEAVE"


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class PayrunStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PayslipStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class ComponentType(str, Enum):
    """Kind of a custom salary component."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"


class PermissionAction(str, Enum):
    VIEW = "View"
    CREATE = "Create"
    EDIT = "Edit"
    DELETE = "Delete"
    APPROVE = "Approve"
    PROCESS = "Process"
    EXPORT = "Export"


PAID_LEAVE_TYPES = frozenset({LeaveType.PAID_TIME_OFF, LeaveType.SICK_LEAVE})
MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR_OFFICER, Role.PAYROLL_OFFICER})
