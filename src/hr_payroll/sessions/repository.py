from __future__ import annotations

from datetime import date, datetime
from typing import ContextManager, Optional, Protocol, Sequence

from .model import WorkSession


class SessionRepository(Protocol):
    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def find_active(self, employee_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def list_for_range(self, employee_id: int, start: date, end: date) -> Sequence[WorkSession]:
        """Sessions whose work_date is within [start, end], ordered by start time."""

        raise NotImplementedError

    def list_all_for_range(self, start: date, end: date) -> Sequence[WorkSession]:
        raise NotImplementedError

    def create(self, *, employee_id: int, work_date: date, start_time: datetime) -> WorkSession:
        """Insert an active session; raises ConflictError if one is already active."""

        raise NotImplementedError

    def start_break(self, *, session_id: int, break_start_time: datetime) -> bool:
        raise NotImplementedError

    def end_break(self, *, session_id: int, break_end_time: datetime, total_break_minutes: int) -> bool:
        raise NotImplementedError

    def close(
        self,
        *,
        session_id: int,
        end_time: datetime,
        total_break_minutes: int,
        break_end_time: Optional[datetime],
        working_hours: float,
        overtime_hours: float,
    ) -> bool:
        raise NotImplementedError
