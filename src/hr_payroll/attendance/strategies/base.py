from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ...core.enums import DayStatus
from ...sessions.model import WorkSession


@dataclass(frozen=True)
class StatusDecision:
    status: DayStatus
    note: Optional[str] = None


class DayStatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the status of a day."""

    @abstractmethod
    def decide(self, *, sessions: Sequence[WorkSession], working_hours: float) -> StatusDecision:
        raise NotImplementedError
