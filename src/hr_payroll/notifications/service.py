from __future__ import annotations

import logging

from ..common.datetime_utils import Clock, now_local
from .email import EmailSender
from .model import DeliveryResult, EmailMessage
from .repository import OutboxRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Records every outgoing email in the outbox, then attempts delivery once.

    Failures are logged and stored on the outbox row; callers never see an exception.
    """

    def __init__(self, outbox: OutboxRepository, sender: EmailSender, *, clock: Clock = now_local):
        self._outbox = outbox
        self._sender = sender
        self._clock = clock

    def deliver(self, message: EmailMessage) -> DeliveryResult:
        try:
            outbox_id = self._outbox.enqueue(message)
        except Exception:
            logger.exception("Could not queue email to %s", message.recipient)
            return DeliveryResult(delivered=False, error="Could not queue email")

        try:
            result = self._sender.send(message)
        except Exception as e:
            logger.exception("Email delivery to %s crashed", message.recipient)
            result = DeliveryResult(delivered=False, error=str(e))

        try:
            if result.delivered:
                self._outbox.mark_sent(outbox_id, sent_at=self._clock())
            else:
                logger.warning("Email to %s not delivered: %s", message.recipient, result.error)
                self._outbox.mark_failed(outbox_id, error=result.error)
        except Exception:
            logger.exception("Could not update outbox row %s", outbox_id)

        return DeliveryResult(delivered=result.delivered, outbox_id=outbox_id, error=result.error)

    def send_welcome_email(
        self,
        *,
        recipient: str,
        employee_name: str,
        employee_code: str,
        temporary_password: str,
        company_name: str,
    ) -> DeliveryResult:
        text = (
            f"Hello {employee_name},\n\n"
            f"Welcome to {company_name}! Your account has been created.\n\n"
            f"Employee code: {employee_code}\n"
            f"Login email: {recipient}\n"
            f"Temporary password: {temporary_password}\n\n"
            "Please sign in and change your password as soon as possible.\n"
        )
        html = (
            f"<p>Hello {employee_name},</p>"
            f"<p>Welcome to <strong>{company_name}</strong>! Your account has been created.</p>"
            "<ul>"
            f"<li>Employee code: <strong>{employee_code}</strong></li>"
            f"<li>Login email: {recipient}</li>"
            f"<li>Temporary password: <code>{temporary_password}</code></li>"
            "</ul>"
            "<p>Please sign in and change your password as soon as possible.</p>"
        )
        return self.deliver(
            EmailMessage(
                recipient=recipient,
                subject=f"Welcome to {company_name}",
                text_body=text,
                html_body=html,
            )
        )
