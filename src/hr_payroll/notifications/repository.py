from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import EmailMessage


class OutboxRepository(Protocol):
    def enqueue(self, message: EmailMessage) -> int:
        raise NotImplementedError

    def mark_sent(self, outbox_id: int, *, sent_at: datetime) -> None:
        raise NotImplementedError

    def mark_failed(self, outbox_id: int, *, error: Optional[str]) -> None:
        raise NotImplementedError
