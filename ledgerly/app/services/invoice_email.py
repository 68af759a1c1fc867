"""Email rendering for invoices: subject, HTML body and plaintext body."""

from dataclasses import dataclass
from typing import Optional

from ledgerly.app.services.formatting import DEFAULT_FORMAT, FormatConfig
from ledgerly.app.services.invoice_document import InvoiceDocument
from ledgerly.app.services.invoice_html import render_template


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    html_body: str
    text_body: str
    reply_to: Optional[str] = None


def build_invoice_email(
    document: InvoiceDocument,
    *,
    to: str,
    view_url: str,
    reply_to: Optional[str] = None,
    config: FormatConfig = DEFAULT_FORMAT,
) -> OutgoingEmail:
    context = {"document": document, "view_url": view_url}
    return OutgoingEmail(
        to=to,
        subject=f"Invoice {document.header.invoice_number}",
        html_body=render_template("invoice_email.html", config, **context),
        text_body=render_template("invoice_email.txt", config, **context),
        reply_to=reply_to,
    )
