from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..core.constants import HALF_DAY_MIN_HOURS, LATE_AFTER_HOUR
from ..sessions.model import WorkSession
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import DayStatusStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class DayStatusStrategyFactory:
    """Factory Pattern: choose the day-status strategy from a day's sessions.

    Rules are checked in order: no sessions, short day, late first check-in.
    """

    half_day_min_hours: float = HALF_DAY_MIN_HOURS
    late_after_hour: int = LATE_AFTER_HOUR

    def for_day(self, *, sessions: Sequence[WorkSession], working_hours: float) -> DayStatusStrategy:
        if not sessions:
            return AbsentStrategy()
        if working_hours < self.half_day_min_hours:
            return HalfDayStrategy()
        first_start = min(s.start_time for s in sessions)
        if first_start.hour > self.late_after_hour:
            return LateStrategy()
        return PresentStrategy()
