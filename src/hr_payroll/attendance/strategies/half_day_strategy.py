from __future__ import annotations

from typing import Sequence

from ...core.constants import HALF_DAY_MIN_HOURS
from ...core.enums import DayStatus
from ...sessions.model import WorkSession
from .base import DayStatusStrategy, StatusDecision


class HalfDayStrategy(DayStatusStrategy):
    def decide(self, *, sessions: Sequence[WorkSession], working_hours: float) -> StatusDecision:
        return StatusDecision(status=DayStatus.HALF_DAY, note=f"Worked less than {HALF_DAY_MIN_HOURS}h")
