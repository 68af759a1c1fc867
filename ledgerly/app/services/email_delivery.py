"""Outbound email transport."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ledgerly.app.core.settings import Settings, get_settings
from ledgerly.app.services.invoice_email import OutgoingEmail

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The mail transport refused or failed to accept a message."""


class EmailSender(Protocol):
    def send(self, message: OutgoingEmail) -> None: ...


class SmtpEmailSender:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.email_from
        msg["To"] = message.to
        msg["Subject"] = message.subject
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        msg.set_content(message.text_body)
        msg.add_alternative(message.html_body, subtype="html")
        return msg

    def send(self, message: OutgoingEmail) -> None:
        settings = self.settings
        try:
            # Header values with line breaks are rejected while building
            msg = self._build_message(message)
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds) as smtp:
                if settings.smtp_use_tls:
                    smtp.starttls()
                if settings.smtp_username:
                    smtp.login(settings.smtp_username, settings.smtp_password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            logger.error("SMTP delivery to %s failed: %s", message.to, exc)
            raise EmailDeliveryError(str(exc)) from exc
        logger.info("Email '%s' delivered to %s", message.subject, message.to)


def get_email_sender() -> EmailSender:
    return SmtpEmailSender(get_settings())
