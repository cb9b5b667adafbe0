from __future__ import annotations

import json
import smtplib

import httpx
import pytest

from eduportal.config import Settings
from eduportal.errors import EmailDeliveryError, ValidationError
from eduportal.mailer import (
    SENDGRID_ENDPOINT,
    EmailMessage,
    LogEmailSender,
    SendGridEmailSender,
    SmtpEmailSender,
    WelcomeMailer,
    build_welcome_message,
    create_email_sender,
)
from tests.fakes import FakeEmailSender

MESSAGE = EmailMessage(to="ada@example.com", sender="portal@example.com", subject="Hi", html="<p>Hi</p>")


def test_build_welcome_message() -> None:
    message = build_welcome_message(" ada@example.com ", "portal@example.com")

    assert message.to == "ada@example.com"
    assert message.sender == "portal@example.com"
    assert message.subject == "Welcome to EduPortal!"
    assert "<h1>" in message.html


@pytest.mark.parametrize("recipient", [None, "", "   "])
def test_welcome_requires_recipient(recipient) -> None:
    sender = FakeEmailSender()
    with pytest.raises(ValidationError):
        WelcomeMailer(sender, "portal@example.com").send_welcome(recipient)
    assert sender.sent == []


def test_sendgrid_posts_v3_payload() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(202)

    sender = SendGridEmailSender("sg-key", client=httpx.Client(transport=httpx.MockTransport(handler)))
    sender.send(MESSAGE)

    assert captured["url"] == SENDGRID_ENDPOINT
    assert captured["auth"] == "Bearer sg-key"
    assert captured["body"] == {
        "personalizations": [{"to": [{"email": "ada@example.com"}]}],
        "from": {"email": "portal@example.com"},
        "subject": "Hi",
        "content": [{"type": "text/html", "value": "<p>Hi</p>"}],
    }


def test_sendgrid_rejection_raises_delivery_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"errors": [{"message": "bad key"}]}))
    sender = SendGridEmailSender("sg-key", client=httpx.Client(transport=transport))

    with pytest.raises(EmailDeliveryError) as excinfo:
        sender.send(MESSAGE)
    assert excinfo.value.message == "Failed to send email."
    assert "401" in str(excinfo.value)


def test_sendgrid_transport_failure_raises_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    sender = SendGridEmailSender("sg-key", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(EmailDeliveryError):
        sender.send(MESSAGE)


class _FakeSMTP:
    instances: list = []

    def __init__(self, server: str, port: int) -> None:
        self.server = server
        self.port = port
        self.logged_in = None
        self.sent = []
        _FakeSMTP.instances.append(self)

    def __enter__(self) -> "_FakeSMTP":
        return self

    def __exit__(self, *exc_info) -> bool:
        return False

    def starttls(self) -> None:
        pass

    def login(self, username: str, password: str) -> None:
        self.logged_in = (username, password)

    def send_message(self, message) -> None:
        self.sent.append(message)


def test_smtp_sender_sends_html_message(monkeypatch) -> None:
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)

    SmtpEmailSender("smtp.example.com", 2525, "user", "secret").send(MESSAGE)

    (smtp,) = _FakeSMTP.instances
    assert (smtp.server, smtp.port) == ("smtp.example.com", 2525)
    assert smtp.logged_in == ("user", "secret")
    assert smtp.sent[0]["To"] == "ada@example.com"
    assert smtp.sent[0]["Subject"] == "Hi"


def test_smtp_failure_raises_delivery_error(monkeypatch) -> None:
    def refuse(server: str, port: int):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    with pytest.raises(EmailDeliveryError):
        SmtpEmailSender("smtp.example.com", 25).send(MESSAGE)


def test_create_email_sender_selects_backend(monkeypatch) -> None:
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    assert isinstance(create_email_sender(Settings(EDUPORTAL_EMAIL_BACKEND="log")), LogEmailSender)
    assert isinstance(create_email_sender(Settings(EDUPORTAL_EMAIL_BACKEND="smtp")), SmtpEmailSender)
    sendgrid = create_email_sender(Settings(EDUPORTAL_EMAIL_BACKEND="sendgrid", SENDGRID_API_KEY="sg-key"))
    assert isinstance(sendgrid, SendGridEmailSender)
    with pytest.raises(RuntimeError):
        create_email_sender(Settings(EDUPORTAL_EMAIL_BACKEND="sendgrid"))
