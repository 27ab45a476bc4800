"""Outbound mail delivery."""

import logging
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from sitecms.config import Settings

logger = logging.getLogger("sitecms.notifier")


class Notifier(ABC):
    """Sends a message to a single recipient. Raises on delivery failure."""

    @abstractmethod
    async def send(self, recipient: str, subject: str, text: str, html: str | None = None) -> None: ...


class SMTPNotifier(Notifier):
    """Email notifier using async SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_email: str,
        from_name: str,
        use_tls: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls

    def build_message(self, recipient: str, subject: str, text: str, html: str | None) -> MIMEMultipart:
        """Build a multipart message with plain text and optional HTML parts."""
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(text, "plain", "utf-8"))
        if html:
            message.attach(MIMEText(html, "html", "utf-8"))
        return message

    async def send(self, recipient: str, subject: str, text: str, html: str | None = None) -> None:
        message = self.build_message(recipient, subject, text, html)
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            start_tls=self.use_tls,
        )
        logger.info("Email sent to %s: %s", recipient, subject)


class ConsoleNotifier(Notifier):
    """Logs messages instead of sending them. Used when SMTP is not configured."""

    async def send(self, recipient: str, subject: str, text: str, html: str | None = None) -> None:
        logger.info("EMAIL to=%s subject=%r\n%s", recipient, subject, text)


def build_notifier(settings: Settings) -> Notifier:
    """Construct the configured notifier."""
    if settings.smtp_configured:
        logger.info("Email notifier configured with host %s", settings.SMTP_HOST)
        return SMTPNotifier(
            host=settings.SMTP_HOST,  # type: ignore[arg-type]
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,  # type: ignore[arg-type]
            password=settings.SMTP_PASSWORD,  # type: ignore[arg-type]
            from_email=settings.SMTP_FROM_EMAIL,  # type: ignore[arg-type]
            from_name=settings.SMTP_FROM_NAME,
            use_tls=settings.SMTP_USE_TLS,
        )
    return ConsoleNotifier()
