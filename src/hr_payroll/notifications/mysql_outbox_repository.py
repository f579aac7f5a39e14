from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import EmailMessage
from .repository import OutboxRepository


class MySQLOutboxRepository(OutboxRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def enqueue(self, message: EmailMessage) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_outbox(recipient, subject, body_text, body_html, status)
                VALUES(%s,%s,%s,%s,'QUEUED')
                """,
                (message.recipient, message.subject, message.text_body, message.html_body),
            )
            return int(cur.lastrowid)

    def mark_sent(self, outbox_id: int, *, sent_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE email_outbox SET status='SENT', attempts=attempts+1, sent_at=%s WHERE email_id=%s",
                (sent_at, int(outbox_id)),
            )

    def mark_failed(self, outbox_id: int, *, error: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE email_outbox SET status='FAILED', attempts=attempts+1, last_error=%s WHERE email_id=%s",
                (error, int(outbox_id)),
            )
