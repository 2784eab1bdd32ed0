"""
Outbound email over SMTP.

smtplib is blocking, so each send runs in a worker thread and the
caller awaits it without holding up the event loop.
"""
import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from breakfast4u.config import get_settings
from breakfast4u.services.email_templates import EmailContent
from breakfast4u.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


class EmailService:
    def __init__(self):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT
        self.from_name = settings.EMAIL_FROM_NAME

    @property
    def is_available(self) -> bool:
        return bool(self.host)

    def _build_message(self, to: str, subject: str, html: str, text: Optional[str]) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self.from_name, self.user or f"no-reply@{self.host}"))
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text or "This message requires an HTML capable email client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

    async def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None:
        """Send one email. Raises on any delivery failure."""
        if not self.is_available:
            raise RuntimeError("Email service not configured: SMTP_HOST is not set")

        msg = self._build_message(to, subject, html, text)
        await asyncio.to_thread(self._send_sync, msg)
        logger.info(f"Email sent to {to}: {subject}")


email_service = EmailService()


async def notify(to: Optional[str], content: EmailContent) -> bool:
    """Best-effort send: failures are logged and reported as False, never raised"""
    if not to:
        logger.warning(f"Skipping email '{content.subject}': no recipient")
        return False
    try:
        await email_service.send(to, content.subject, content.html)
        return True
    except Exception as e:
        logger.error(f"Email '{content.subject}' to {to} failed: {e}")
        return False
