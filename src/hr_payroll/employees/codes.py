from __future__ import annotations

import secrets
import string
from datetime import date

from ..core.constants import TEMP_PASSWORD_LENGTH

_SYMBOLS = "!@#$%^&*"


def generate_employee_code(first_name: str, last_name: str, company_name: str, date_of_joining: date, serial: int) -> str:
    """[company initials (max 4)][first 2 + last 2 name letters][join year][4-digit serial].

    Example: "Odoo India", John Doe, 2022, 1 -> ODINJODO20220001
    """
    company = "".join(word[:2].upper() for word in company_name.split())[:4]
    initials = (first_name.strip()[:2] + last_name.strip()[:2]).upper()
    return f"{company}{initials}{date_of_joining.year}{int(serial):04d}"


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    """Random password with at least one upper, lower, digit and symbol."""
    length = max(length, 4)
    alphabet = string.ascii_letters + string.digits + _SYMBOLS
    chars = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(_SYMBOLS),
    ]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
