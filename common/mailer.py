"""
Contact form mailer.

SMTP settings come from the environment (SMTP_HOST, SMTP_PORT, SMTP_USER,
SMTP_PASS, CONTACT_EMAIL) and are read when a message is sent.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class MailConfigurationError(Exception):
    """SMTP settings are missing."""


class MailSettings(BaseSettings):
    """SMTP relay settings for the contact form."""

    model_config = SettingsConfigDict(case_sensitive=False)

    smtp_host: Optional[str] = Field(default=None, description="SMTP relay host")
    smtp_port: int = Field(default=587, description="SMTP relay port (465 = implicit TLS)")
    smtp_user: Optional[str] = Field(default=None, description="SMTP login")
    smtp_pass: Optional[str] = Field(default=None, description="SMTP password")
    contact_email: Optional[str] = Field(default=None, description="Where contact messages are delivered")

    def missing(self) -> list:
        """Names of the required settings that are not set."""
        required = {
            "SMTP_HOST": self.smtp_host,
            "SMTP_USER": self.smtp_user,
            "SMTP_PASS": self.smtp_pass,
            "CONTACT_EMAIL": self.contact_email,
        }
        return [name for name, value in required.items() if not value]

    def is_configured(self) -> bool:
        return not self.missing()


def build_contact_message(name: str, email: str, message: str, subject: Optional[str], settings: MailSettings) -> MIMEMultipart:
    msg = MIMEMultipart()
    msg["From"] = settings.smtp_user
    msg["To"] = settings.contact_email
    msg["Reply-To"] = email
    msg["Subject"] = f"Contact Form: {subject or 'New message from ' + name}"

    body = (
        "New contact form submission:\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n"
        f"Subject: {subject or '-'}\n\n"
        f"Message:\n{message}\n"
    )
    msg.attach(MIMEText(body, "plain"))
    return msg


def send_contact_message(
    name: str,
    email: str,
    message: str,
    subject: Optional[str] = None,
    settings: Optional[MailSettings] = None,
) -> None:
    """
    Send a contact form submission to the configured inbox.

    Raises:
        MailConfigurationError: If SMTP settings are incomplete
        smtplib.SMTPException: If the relay rejects the message
    """
    settings = settings or MailSettings()
    missing = settings.missing()
    if missing:
        raise MailConfigurationError(f"Email service is not configured (missing {', '.join(missing)})")

    msg = build_contact_message(name, email, message, subject, settings)

    if settings.smtp_port == 465:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port) as server:
            server.login(settings.smtp_user, settings.smtp_pass)
            server.send_message(msg)
    else:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_pass)
            server.send_message(msg)

    logger.info("Contact message from %s delivered to %s", email, settings.contact_email)
