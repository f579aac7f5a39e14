from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from ..core.constants import MONEY_QUANTUM


def to_decimal(value: Any) -> Decimal:
    """Coerce DB/JSON numbers (Decimal, int, float, str, None) into Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def percent_of(base: Decimal, percentage: Any) -> Decimal:
    return base * to_decimal(percentage) / Decimal(100)


def total(values: Iterable[Any]) -> Decimal:
    return sum((to_decimal(v) for v in values), Decimal("0"))
