"""Email sender selection and SMTP delivery (smtplib replaced by a fake)."""

import logging

import pytest

from officeflow.core.config import Settings
from officeflow.infrastructure.notifications import email_sender
from officeflow.infrastructure.notifications.email_sender import (
    LogOnlyEmailSender,
    SmtpEmailSender,
    build_email_sender,
)


class _FakeSMTP:
    """Stands in for smtplib.SMTP and keeps every connection it opens."""

    connections: list["_FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls: list[tuple] = []
        self.sent = []
        _FakeSMTP.connections.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append(("quit",))
        return False

    def starttls(self):
        self.calls.append(("starttls",))

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, message):
        self.calls.append(("send_message",))
        self.sent.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    _FakeSMTP.connections = []
    monkeypatch.setattr(email_sender.smtplib, "SMTP", _FakeSMTP)
    return _FakeSMTP


@pytest.fixture
def settings(monkeypatch):
    def _make(**env) -> Settings:
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./x.db")
        monkeypatch.setenv("SECRET_KEY", "k" * 32)
        for key in ("EMAIL_ENABLED", "SMTP_HOST", "SMTP_USERNAME", "SMTP_PASSWORD"):
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return Settings(_env_file=None)

    return _make


def test_email_disabled_means_no_sender(settings):
    assert build_email_sender(settings(SMTP_HOST="smtp.example.com")) is None


def test_enabled_without_host_falls_back_to_logging(settings, caplog):
    with caplog.at_level(logging.WARNING):
        sender = build_email_sender(settings(EMAIL_ENABLED="true"))

    assert isinstance(sender, LogOnlyEmailSender)
    assert "SMTP_HOST" in caplog.text


def test_enabled_with_host_uses_smtp(settings):
    sender = build_email_sender(
        settings(
            EMAIL_ENABLED="true",
            SMTP_HOST="smtp.example.com",
            SMTP_PORT="2525",
            SMTP_USERNAME="mailer",
            SMTP_PASSWORD="hunter2",
            SMTP_USE_TLS="false",
            EMAIL_FROM="office@example.com",
        )
    )

    assert isinstance(sender, SmtpEmailSender)
    assert (sender.host, sender.port) == ("smtp.example.com", 2525)
    assert sender.username == "mailer"
    assert sender.password == "hunter2"
    assert sender.use_tls is False
    assert sender.from_address == "office@example.com"


async def test_smtp_send_uses_starttls_and_login(fake_smtp):
    sender = SmtpEmailSender(
        "smtp.example.com",
        587,
        from_address="office@example.com",
        username="mailer",
        password="hunter2",
    )

    await sender.send(["ana@example.com", " "], "Task Assigned", "You have a task")

    (conn,) = fake_smtp.connections
    assert (conn.host, conn.port) == ("smtp.example.com", 587)
    assert conn.calls == [
        ("starttls",),
        ("login", "mailer", "hunter2"),
        ("send_message",),
        ("quit",),
    ]
    message = conn.sent[0]
    assert message["To"] == "ana@example.com"
    assert message["From"] == "office@example.com"
    assert message["Subject"] == "Task Assigned"
    assert message.get_content().strip() == "You have a task"


async def test_smtp_without_credentials_skips_login(fake_smtp):
    sender = SmtpEmailSender(
        "localhost", 25, from_address="office@example.com", use_tls=False
    )

    await sender.send(["ana@example.com"], "Hi", "Body")

    assert fake_smtp.connections[0].calls == [("send_message",), ("quit",)]


async def test_smtp_with_no_recipients_opens_no_connection(fake_smtp):
    sender = SmtpEmailSender("localhost", from_address="office@example.com")

    await sender.send([], "Hi", "Body")

    assert fake_smtp.connections == []


async def test_smtp_errors_propagate(monkeypatch):
    class _Refusing(_FakeSMTP):
        def send_message(self, message):
            raise email_sender.smtplib.SMTPRecipientsRefused({})

    monkeypatch.setattr(email_sender.smtplib, "SMTP", _Refusing)
    sender = SmtpEmailSender("localhost", from_address="office@example.com")

    with pytest.raises(email_sender.smtplib.SMTPRecipientsRefused):
        await sender.send(["ana@example.com"], "Hi", "Body")


async def test_log_only_sender_logs_subject(caplog):
    with caplog.at_level(logging.INFO):
        await LogOnlyEmailSender("office@example.com").send(
            ["ana@example.com"], "Task Assigned", "Body"
        )

    assert "Task Assigned" in caplog.text
    assert "ana@example.com" in caplog.text
