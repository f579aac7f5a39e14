from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MAX_PAYROLL_YEAR, MIN_PAYROLL_YEAR
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_month_year(month: Any, year: Any) -> tuple[int, int]:
    try:
        m = int(month)
        y = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Invalid month or year")
    if m < 1 or m > 12 or y < MIN_PAYROLL_YEAR or y > MAX_PAYROLL_YEAR:
        raise ValidationError("Invalid month or year")
    return m, y


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    v = require_non_empty(value, field_name)
    try:
        return datetime.strptime(v[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def require_decimal(value: Any, field_name: str, *, minimum: Optional[Decimal] = Decimal("0")) -> Decimal:
    try:
        d = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not d.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None and d < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    return d


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
