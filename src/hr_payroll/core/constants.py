"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_WORKDAY_HOURS = 9
HALF_DAY_MIN_HOURS = 4
LATE_AFTER_HOUR = 10

BASIC_SALARY_RATIO = Decimal("0.5")
DEFAULT_HRA_PERCENTAGE = Decimal("50")
DEFAULT_BONUS_PERCENTAGE = Decimal("8.33")
DEFAULT_LTA_PERCENTAGE = Decimal("8.333")
DEFAULT_PF_PERCENTAGE = Decimal("12")
DEFAULT_STANDARD_ALLOWANCE = Decimal("4167")
DEFAULT_PROFESSIONAL_TAX = Decimal("200")

MONEY_QUANTUM = Decimal("0.01")

DEFAULT_LEAVE_ALLOCATIONS = {
    "PAID_TIME_OFF": 24,
    "SICK_LEAVE": 7,
    "UNPAID_LEAVE": 0,
}

MIN_PAYROLL_YEAR = 2000
MAX_PAYROLL_YEAR = 2100
DEFAULT_PAGE_SIZE = 50
DEFAULT_RECENT_PAYRUNS = 6
TEMP_PASSWORD_LENGTH = 12
