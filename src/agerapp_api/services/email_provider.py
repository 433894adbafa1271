"""
Email Provider Service
Adapter pattern for sending emails (dev logging vs production SMTP)
"""
import logging
import smtplib
from collections import deque
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from .email_templates import BrandedTemplate

logger = logging.getLogger(__name__)

# Messages kept by the dev provider; older ones are dropped
DEV_OUTBOX_LIMIT = 100


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the provider"""


@dataclass
class EmailMessage:
    """Email message structure"""
    to: str
    subject: str
    html_body: str
    text_body: Optional[str] = None
    from_address: Optional[str] = None
    reply_to: Optional[str] = None


class EmailProvider(ABC):
    """
    Abstract email provider interface

    Implementations:
    - DevEmailProvider: Logs emails (development and tests)
    - SMTPEmailProvider: Sends via SMTP (production)
    """

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """
        Send an email

        Returns:
            True if sent successfully, False otherwise
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if email provider is configured"""


class DevEmailProvider(EmailProvider):
    """Logs emails instead of sending them and keeps them for inspection"""

    def __init__(self, limit: int = DEV_OUTBOX_LIMIT):
        self.outbox: deque = deque(maxlen=limit)

    def send(self, message: EmailMessage) -> bool:
        self.outbox.append(message)
        logger.info(f"EMAIL (dev mode, not sent) to={message.to} subject={message.subject!r}")
        if message.text_body:
            logger.debug(f"Text body:\n{message.text_body}")
        return True

    def is_available(self) -> bool:
        return True


class SMTPEmailProvider(EmailProvider):
    """
    SMTP email provider for production

    Configured via SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD,
    SMTP_FROM_ADDRESS and MAIL_FROM_NAME.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_address: str,
        from_name: str = "AgerApp",
        use_tls: bool = True,
        timeout: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_address = from_address
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, message: EmailMessage) -> bool:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = message.subject
        msg['From'] = formataddr((self.from_name, message.from_address or self.from_address))
        msg['To'] = message.to
        if message.reply_to:
            msg['Reply-To'] = message.reply_to

        if message.text_body:
            msg.attach(MIMEText(message.text_body, 'plain'))
        msg.attach(MIMEText(message.html_body, 'html'))

        try:
            # Port 465 is implicit TLS; everything else upgrades with STARTTLS
            if self.port == 465:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                if self.use_tls and self.port != 465:
                    server.starttls()
                server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message.to}: {e}", exc_info=True)
            return False

        logger.info(f"Email sent to {message.to}: {message.subject}")
        return True

    def is_available(self) -> bool:
        return all([self.host, self.port, self.user, self.password, self.from_address])


# Singleton instance
_email_provider: Optional[EmailProvider] = None


def get_email_provider() -> EmailProvider:
    """
    Get or create email provider singleton

    Returns SMTPEmailProvider when SMTP is configured, DevEmailProvider otherwise
    """
    global _email_provider

    if _email_provider is None:
        from ..config import config

        try:
            smtp_port = int(config.SMTP_PORT)
        except ValueError:
            logger.warning(f"Invalid SMTP_PORT value: {config.SMTP_PORT}, using default 587")
            smtp_port = 587

        if config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASSWORD:
            logger.info(f"Email provider: SMTP ({config.SMTP_HOST}:{smtp_port})")
            _email_provider = SMTPEmailProvider(
                host=config.SMTP_HOST,
                port=smtp_port,
                user=config.SMTP_USER,
                password=config.SMTP_PASSWORD,
                from_address=config.SMTP_FROM_ADDRESS or config.SMTP_USER,
                from_name=config.MAIL_FROM_NAME,
            )
        else:
            logger.info("Email provider: DevEmailProvider (SMTP_HOST/SMTP_USER/SMTP_PASSWORD not set)")
            _email_provider = DevEmailProvider()

    return _email_provider


def set_email_provider(provider: Optional[EmailProvider]) -> None:
    """Replace the singleton (tests install a DevEmailProvider to read the outbox)"""
    global _email_provider
    _email_provider = provider


def send_email(
    to: str,
    subject: str,
    text: Optional[str] = None,
    html: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> None:
    """
    Send a branded email

    Raises:
        EmailDeliveryError: if the provider reports failure
    """
    message = EmailMessage(
        to=to,
        subject=subject,
        html_body=BrandedTemplate.render_html(subject=subject, text=text, body_html=html),
        text_body=BrandedTemplate.render_plain_text(text=text),
        reply_to=reply_to,
    )
    if not get_email_provider().send(message):
        raise EmailDeliveryError(f"Could not deliver '{subject}' email")
