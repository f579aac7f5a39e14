from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from .model import DeliveryResult, EmailMessage

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, message: EmailMessage) -> DeliveryResult:
        raise NotImplementedError


class SMTPEmailSender:
    """Transactional email over SMTP with STARTTLS."""

    def __init__(
        self,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        from_email: str = "",
        from_name: str = "HR Payroll",
        timeout: int = 10,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_email = from_email or smtp_user
        self.from_name = from_name
        self.timeout = timeout

    def send(self, message: EmailMessage) -> DeliveryResult:
        if not self.smtp_user or not self.smtp_password:
            logger.warning("Email not configured. SMTP credentials missing.")
            return DeliveryResult(delivered=False, error="Email not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = message.recipient
        msg.attach(MIMEText(message.text_body, "plain"))
        if message.html_body:
            msg.attach(MIMEText(message.html_body, "html"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, message.recipient, msg.as_string())
        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed. Check email credentials.")
            return DeliveryResult(delivered=False, error="SMTP authentication failed")
        except smtplib.SMTPException as e:
            logger.error("SMTP error sending to %s: %s", message.recipient, e)
            return DeliveryResult(delivered=False, error=str(e))
        except OSError as e:
            logger.error("Network error sending email to %s: %s", message.recipient, e)
            return DeliveryResult(delivered=False, error=str(e))

        logger.info("Email sent to %s", message.recipient)
        return DeliveryResult(delivered=True)
