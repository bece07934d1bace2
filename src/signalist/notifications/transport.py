"""SMTP email transport."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

from ..config.logging import get_logger
from ..exceptions import ConfigurationError, EmailDeliveryError

logger = get_logger(__name__)


@dataclass
class OutgoingEmail:
    """A single-recipient email ready to send."""

    to: str
    subject: str
    text: str
    html: str


class EmailTransport(Protocol):
    """Protocol for email transports."""

    async def send(self, email: OutgoingEmail) -> None:
        """Deliver one email or raise EmailDeliveryError."""
        ...


class SMTPEmailTransport:
    """Authenticated SMTP transport using STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str],
        password: Optional[str],
        sender_name: str = "Signalist",
        use_tls: bool = True,
        timeout_seconds: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender_name = sender_name
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(transport="smtp", host=host)

    @property
    def sender(self) -> str:
        return formataddr((self.sender_name, self.user or ""))

    def build_message(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = email.subject
        message["From"] = self.sender
        message["To"] = email.to
        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
            if self.use_tls:
                server.starttls()
            server.login(self.user, self.password)
            server.send_message(message)

    async def send(self, email: OutgoingEmail) -> None:
        """
        Send an email in a worker thread.

        Raises:
            ConfigurationError: SMTP credentials are not configured
            EmailDeliveryError: the SMTP server refused or the connection failed
        """
        if not self.user or not self.password:
            raise ConfigurationError("smtp_user", "SMTP credentials are not configured")

        message = self.build_message(email)

        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email",
                recipient=email.to,
                subject=email.subject,
                error=str(e),
            )
            raise EmailDeliveryError(email.to, str(e)) from e

        self.logger.info("Email sent", recipient=email.to, subject=email.subject)
