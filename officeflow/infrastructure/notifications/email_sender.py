"""Email senders and the choice between them.

SMTP delivery when SMTP_HOST is set; with EMAIL_ENABLED but no host, messages
are only logged so local setups still show what would have gone out.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from officeflow.application.interfaces.services import IEmailSender
from officeflow.core.config import Settings
from officeflow.shared.logging import get_logger

logger = get_logger(__name__)


def _recipients(to_emails: list[str] | None) -> list[str]:
    return [e.strip() for e in (to_emails or []) if e and e.strip()]


class SmtpEmailSender:
    """IEmailSender over SMTP with optional STARTTLS and login.

    smtplib blocks, so each message is sent from a worker thread. Failures
    propagate; NotificationDeliveryService logs them.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        from_address: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, to_emails: list[str], subject: str, body: str) -> None:
        recipients = _recipients(to_emails)
        if not recipients:
            return
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = ", ".join(recipients)
        message.set_content(body)
        await asyncio.to_thread(self._deliver, message)
        logger.info("Email sent via %s to %d recipient(s)", self.host, len(recipients))

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)


class LogOnlyEmailSender:
    """Logs each message instead of sending it."""

    def __init__(self, from_address: str) -> None:
        self.from_address = from_address

    async def send(self, to_emails: list[str], subject: str, body: str) -> None:
        recipients = _recipients(to_emails)
        if not recipients:
            return
        logger.info(
            "Email not sent (no SMTP_HOST): %r from %s to %s",
            subject,
            self.from_address,
            ", ".join(recipients),
        )
        logger.debug("Email body: %s", body)


def build_email_sender(settings: Settings) -> IEmailSender | None:
    """None when email is off, SMTP when a host is set, otherwise log-only."""
    if not settings.email_enabled:
        return None
    if settings.smtp_host:
        return SmtpEmailSender(
            settings.smtp_host,
            settings.smtp_port,
            from_address=settings.email_from,
            username=settings.smtp_username or None,
            password=settings.smtp_password.get_secret_value() or None,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    logger.warning("EMAIL_ENABLED is set without SMTP_HOST; emails will only be logged")
    return LogOnlyEmailSender(settings.email_from)
