"""Transactional email: the welcome message sent after sign-up.

``EDUPORTAL_EMAIL_BACKEND`` picks the transport:
  - "log" (default): writes the message to the log
  - "smtp": sends through an SMTP relay using the EDUPORTAL_MAIL_* settings
  - "sendgrid": posts to the SendGrid v3 mail API with SENDGRID_API_KEY
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional, Protocol

import httpx

from .config import Settings
from .errors import EmailDeliveryError, ValidationError

logger = logging.getLogger(__name__)

SENDGRID_ENDPOINT = "https://api.sendgrid.com/v3/mail/send"
WELCOME_SUBJECT = "Welcome to EduPortal!"
WELCOME_HTML = "<h1>Welcome to EduPortal!</h1><p>Your account has been created successfully.</p>"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    sender: str
    subject: str
    html: str


class EmailSender(Protocol):
    def send(self, message: EmailMessage) -> None:
        ...


class LogEmailSender:
    def send(self, message: EmailMessage) -> None:
        logger.info("EMAIL [to=%s from=%s] subject=%s\n%s", message.to, message.sender, message.subject, message.html)


class SmtpEmailSender:
    def __init__(self, server: str, port: int, username: str = "", password: str = "") -> None:
        self.server = server
        self.port = port
        self.username = username
        self.password = password

    def send(self, message: EmailMessage) -> None:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = message.sender
        mime["To"] = message.to
        mime.attach(MIMEText(message.html, "html"))
        try:
            with smtplib.SMTP(self.server, self.port) as smtp:
                smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(mime)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(f"SMTP send to {message.to} failed: {exc}") from exc


class SendGridEmailSender:
    def __init__(self, api_key: str, client: Optional[httpx.Client] = None) -> None:
        self.api_key = api_key
        self._client = client

    def _payload(self, message: EmailMessage) -> Dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.sender},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }

    def send(self, message: EmailMessage) -> None:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        post = self._client.post if self._client is not None else httpx.post
        try:
            response = post(SENDGRID_ENDPOINT, headers=headers, json=self._payload(message), timeout=30)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = {
                "status_code": exc.response.status_code,
                "body": exc.response.text,
            }
            raise EmailDeliveryError(f"SendGrid rejected message to {message.to}: {detail}") from exc
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"SendGrid request for {message.to} failed: {exc}") from exc


def build_welcome_message(recipient: Optional[str], sender: str) -> EmailMessage:
    if recipient is None or not recipient.strip():
        raise ValidationError("Recipient email is required.")
    return EmailMessage(to=recipient.strip(), sender=sender, subject=WELCOME_SUBJECT, html=WELCOME_HTML)


def create_email_sender(settings: Settings) -> EmailSender:
    backend = settings.email_backend
    if backend == "smtp":
        return SmtpEmailSender(
            settings.mail_server,
            settings.mail_port,
            settings.mail_username,
            settings.mail_password,
        )
    if backend == "sendgrid":
        if not settings.sendgrid_api_key:
            raise RuntimeError("SENDGRID_API_KEY must be set when EDUPORTAL_EMAIL_BACKEND=sendgrid.")
        return SendGridEmailSender(settings.sendgrid_api_key)
    return LogEmailSender()


class WelcomeMailer:
    """Sends the sign-up welcome email; independent of profile creation."""

    def __init__(self, sender: EmailSender, mail_from: str) -> None:
        self._sender = sender
        self._mail_from = mail_from

    def send_welcome(self, recipient: Optional[str]) -> EmailMessage:
        message = build_welcome_message(recipient, self._mail_from)
        self._sender.send(message)
        logger.info("Welcome email sent to %s", message.to)
        return message


__all__ = [
    "EmailMessage",
    "EmailSender",
    "LogEmailSender",
    "SendGridEmailSender",
    "SmtpEmailSender",
    "WelcomeMailer",
    "build_welcome_message",
    "create_email_sender",
]
