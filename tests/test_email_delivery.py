import smtplib

import pytest

from ledgerly.app.core.settings import Settings
from ledgerly.app.services import email_delivery
from ledgerly.app.services.email_delivery import EmailDeliveryError, SmtpEmailSender
from ledgerly.app.services.invoice_email import OutgoingEmail


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sent = []
        self.started_tls = False
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.logged_in = (username, password)

    def send_message(self, msg):
        self.sent.append(msg)


class RefusingSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({"ap@globex.com": (550, b"no such user")})


def make_message():
    return OutgoingEmail(
        to="ap@globex.com",
        subject="Invoice INV0001",
        html_body="<p>Invoice</p>",
        text_body="Invoice",
        reply_to="billing@acme.com",
    )


def test_smtp_sender_builds_multipart_message(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_delivery.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setenv("LEDGERLY_SMTP_USE_TLS", "true")
    monkeypatch.setenv("LEDGERLY_SMTP_USERNAME", "mailer")
    monkeypatch.setenv("LEDGERLY_SMTP_PASSWORD", "hunter2")
    monkeypatch.setenv("LEDGERLY_EMAIL_FROM", "invoices@acme.com")

    SmtpEmailSender(Settings()).send(make_message())

    smtp = FakeSMTP.instances[0]
    assert smtp.started_tls is True
    assert smtp.logged_in == ("mailer", "hunter2")
    msg = smtp.sent[0]
    assert msg["From"] == "invoices@acme.com"
    assert msg["To"] == "ap@globex.com"
    assert msg["Reply-To"] == "billing@acme.com"
    assert msg["Subject"] == "Invoice INV0001"
    assert msg.get_body(preferencelist=("html",)).get_content().strip() == "<p>Invoice</p>"
    assert msg.get_body(preferencelist=("plain",)).get_content().strip() == "Invoice"


def test_smtp_failures_raise_delivery_error(monkeypatch):
    monkeypatch.setattr(email_delivery.smtplib, "SMTP", RefusingSMTP)
    with pytest.raises(EmailDeliveryError):
        SmtpEmailSender(Settings()).send(make_message())


def test_header_with_line_break_raises_delivery_error(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_delivery.smtplib, "SMTP", FakeSMTP)
    message = OutgoingEmail(
        to="ap@globex.com",
        subject="Invoice INV1\nBcc: someone@elsewhere.com",
        html_body="<p>Invoice</p>",
        text_body="Invoice",
    )
    with pytest.raises(EmailDeliveryError):
        SmtpEmailSender(Settings()).send(message)
    assert FakeSMTP.instances == []
