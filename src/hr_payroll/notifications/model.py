from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmailMessage:
    recipient: str
    subject: str
    text_body: str
    html_body: Optional[str] = None


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one delivery attempt; never raised as an error."""

    delivered: bool
    outbox_id: Optional[int] = None
    error: Optional[str] = None
