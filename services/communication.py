from __future__ import annotations

import logging
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Tuple

from core.config import AppSettings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP email sender (supports Gmail / generic SMTP)."""

    def __init__(self, settings: AppSettings, *, timeout: float = 30.0) -> None:
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_username
        self.smtp_pass = settings.smtp_password
        self.from_email = settings.smtp_from_email or self.smtp_user
        self.from_name = settings.smtp_from_name
        self.timeout = timeout

    def send(
        self,
        to_email: str,
        subject: str,
        body: str,
        html: str | None = None,
    ) -> Tuple[bool, str | None]:
        """Send one message. Returns (ok, message_id) or (False, error)."""
        if not self.smtp_user or not self.smtp_pass:
            logger.warning("email.not_configured", extra={"to": to_email})
            return False, "smtp not configured"
        try:
            msg = EmailMessage()
            msg["From"] = f"{self.from_name} <{self.from_email}>" if self.from_email else self.from_name
            msg["To"] = to_email
            msg["Subject"] = subject
            message_id = make_msgid()
            msg["Message-ID"] = message_id
            msg.set_content(body)
            if html:
                msg.add_alternative(html, subtype="html")
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as s:
                s.ehlo(); s.starttls(); s.ehlo(); s.login(self.smtp_user, self.smtp_pass); s.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email.send_failed", extra={"to": to_email, "error": str(exc)})
            return False, str(exc)
        logger.info("email.sent", extra={"to": to_email, "message_id": message_id})
        return True, message_id

    def send_test(self, to_email: str) -> Tuple[bool, str | None]:
        sent_at = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        body = (
            "This is a test email to verify that email notifications are working correctly.\n\n"
            f"Sent at: {sent_at}"
        )
        html = (
            "<h2>Test Email</h2>"
            "<p>This is a test email to verify that email notifications are working correctly.</p>"
            "<p>If you received this email, your email notification system is properly configured!</p>"
            f"<p><strong>Sent at:</strong> {sent_at}</p>"
        )
        return self.send(to_email, "Test Email from Salon Booking System", body, html)
