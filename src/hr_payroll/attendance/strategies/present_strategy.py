from __future__ import annotations

from typing import Sequence

from ...core.enums import DayStatus
from ...sessions.model import WorkSession
from .base import DayStatusStrategy, StatusDecision


class PresentStrategy(DayStatusStrategy):
    def decide(self, *, sessions: Sequence[WorkSession], working_hours: float) -> StatusDecision:
        return StatusDecision(status=DayStatus.PRESENT)
