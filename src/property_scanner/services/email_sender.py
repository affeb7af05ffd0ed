"""Mail transports used to deliver deal alerts."""

import asyncio
import logging
import os
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class MailTransport(ABC):
    """Capability interface for sending a single HTML email."""

    @abstractmethod
    async def send(self, recipient: str, subject: str, body: str) -> bool:
        """
        Deliver one message.

        Returns:
            True if the message was accepted for delivery

        Raises:
            TransportError: If the message could not be sent
        """

    def is_configured(self) -> bool:
        return True


class SmtpMailTransport(MailTransport):
    """
    Send email over SMTP with STARTTLS.

    Defaults to Gmail; use an App Password for SMTP_PASSWORD
    (https://myaccount.google.com/apppasswords).
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.smtp_host = host or os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.smtp_port = int(port or os.getenv("SMTP_PORT", "587"))
        self.smtp_user = user or os.getenv("SMTP_USER")
        self.smtp_password = password or os.getenv("SMTP_PASSWORD")
        self.timeout = timeout

    def is_configured(self) -> bool:
        """Check if SMTP credentials are present."""
        return bool(self.smtp_user and self.smtp_password)

    async def send(self, recipient: str, subject: str, body: str) -> bool:
        if not self.is_configured():
            raise TransportError("SMTP credentials not configured (set SMTP_USER and SMTP_PASSWORD)")

        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send_blocking, recipient, subject, body)
        return True

    def _send_blocking(self, recipient: str, subject: str, body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.smtp_user
        msg["To"] = recipient
        msg.attach(MIMEText(body, "html"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.smtp_user, [recipient], msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            raise TransportError(
                "SMTP authentication failed. For Gmail, ensure you're using an App Password"
            ) from e
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"Failed to send email via SMTP: {e}") from e

        logger.info(f"Email sent to {recipient}")
