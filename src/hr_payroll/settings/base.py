"""Settings shared by every environment; each environment module overrides what it needs."""

import json
import os

from ..core import constants


def _flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
    # 0 disables pooling
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

DEBUG = _flag("DEBUG")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = _flag("AUTO_INIT_DB")
AUTO_SEED_DB = _flag("AUTO_SEED_DB")

COMPANY_NAME = os.getenv("COMPANY_NAME", "Odoo India")
STANDARD_ALLOWANCE = os.getenv("STANDARD_ALLOWANCE", str(constants.DEFAULT_STANDARD_ALLOWANCE))
# JSON object, e.g. {"PAID_TIME_OFF": 24, "SICK_LEAVE": 7, "UNPAID_LEAVE": 0}
_allocations = os.getenv("DEFAULT_LEAVE_ALLOCATIONS")
DEFAULT_LEAVE_ALLOCATIONS = json.loads(_allocations) if _allocations else dict(constants.DEFAULT_LEAVE_ALLOCATIONS)

SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", SMTP_USER or "no-reply@localhost")
