from __future__ import annotations

from typing import Sequence

from ...core.enums import DayStatus
from ...sessions.model import WorkSession
from .base import DayStatusStrategy, StatusDecision


class LateStrategy(DayStatusStrategy):
    """Late first check-in."""

    def decide(self, *, sessions: Sequence[WorkSession], working_hours: float) -> StatusDecision:
        first = min(s.start_time for s in sessions)
        return StatusDecision(status=DayStatus.LATE, note=f"Checked in at {first:%H:%M}")
