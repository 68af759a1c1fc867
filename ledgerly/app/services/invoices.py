"""Invoice lifecycle: numbering, create/update, status, sharing and sending."""

import logging
import re
import secrets
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledgerly.app.core.settings import Settings, get_settings
from ledgerly.app.core.time import local_today
from ledgerly.app.models.business_settings import BusinessSettings
from ledgerly.app.models.client import Client
from ledgerly.app.models.invoice import PARTY_FIELDS, Invoice
from ledgerly.app.models.user import User
from ledgerly.app.schemas.invoice import (
    INVOICE_STATUSES,
    InvoiceCreate,
    InvoicePayload,
    InvoiceUpdate,
    LineItem,
    LineItemInput,
)
from ledgerly.app.services.email_delivery import EmailSender
from ledgerly.app.services.formatting import FormatConfig
from ledgerly.app.services.invoice_document import InvoiceDocument, build_invoice_document
from ledgerly.app.services.invoice_email import OutgoingEmail, build_invoice_email
from ledgerly.app.services.invoice_totals import DEFAULT_RATE, InvoiceTotals, calculate_invoice_totals, parse_decimal

logger = logging.getLogger(__name__)

_INVOICE_NUMBER = re.compile(r"^INV(\d+)$")

# Money columns are Numeric(12, 2)
MAX_STORED_AMOUNT = Decimal("1e10")

_PARTY_COLUMNS = tuple(f"{role}_{field}" for role in ("from", "bill_to") for field in PARTY_FIELDS)


class InvoiceNumberConflict(Exception):
    def __init__(self, invoice_number: str):
        self.invoice_number = invoice_number
        super().__init__(f"Invoice number {invoice_number} already exists")


class InvalidInvoiceStatus(ValueError):
    pass


class InvalidLineItems(ValueError):
    pass


class ClientNotFound(LookupError):
    pass


class MissingRecipient(Exception):
    """The invoice has no bill-to email address to send to."""


def format_config(settings: Optional[Settings] = None) -> FormatConfig:
    settings = settings or get_settings()
    return FormatConfig(currency_symbol=settings.currency_symbol)


def next_invoice_number(db: Session, owner_id: int) -> str:
    """One past the highest ``INV####`` number this owner has used."""
    highest = 0
    for (number,) in db.query(Invoice.invoice_number).filter(Invoice.owner_id == owner_id).all():
        match = _INVOICE_NUMBER.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"INV{highest + 1:04d}"


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def prepare_line_items(rows: Iterable[LineItemInput]) -> InvoiceTotals:
    """Drop fully blank form rows, then run the calculator over the rest."""
    kept = []
    for position, row in enumerate(rows, start=1):
        if _blank(row.name) and _blank(row.description):
            if parse_decimal(row.rate, DEFAULT_RATE) == 0:
                continue
            raise InvalidLineItems(f"Line item {position} needs a name or description")
        kept.append(row)
    totals = calculate_invoice_totals(kept)
    for position, item in enumerate(totals.line_items, start=1):
        if abs(item.amount) >= MAX_STORED_AMOUNT:
            raise InvalidLineItems(f"Line item {position} amount is too large")
    if abs(totals.subtotal) >= MAX_STORED_AMOUNT:
        raise InvalidLineItems("Invoice total is too large")
    return totals


def serialize_line_items(items: List[LineItem]) -> list:
    return [item.model_dump(mode="json") for item in items]


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _apply_payload(invoice: Invoice, payload: InvoicePayload) -> None:
    invoice.invoice_name = (payload.invoice_name or "").strip() or "Invoice"
    invoice.terms = payload.terms
    invoice.custom_terms = _clean_text(payload.custom_terms) if payload.terms == "custom" else None
    invoice.notes = _clean_text(payload.notes)
    if payload.date is not None:
        invoice.date = payload.date
    for column in _PARTY_COLUMNS:
        setattr(invoice, column, _clean_text(getattr(payload, column)))

    totals = prepare_line_items(payload.line_items)
    invoice.line_items = serialize_line_items(totals.line_items)
    invoice.subtotal = totals.subtotal
    invoice.total = totals.total
    invoice.balance_due = totals.balance_due


def _fill_blanks(invoice: Invoice, values: dict) -> None:
    for column, value in values.items():
        if getattr(invoice, column) is None and value:
            setattr(invoice, column, value)


def _ensure_number_available(db: Session, owner_id: int, invoice_number: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Invoice.id).filter(Invoice.owner_id == owner_id, Invoice.invoice_number == invoice_number)
    if exclude_id is not None:
        query = query.filter(Invoice.id != exclude_id)
    if query.first() is not None:
        raise InvoiceNumberConflict(invoice_number)


def _commit(db: Session, invoice: Invoice) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise InvoiceNumberConflict(invoice.invoice_number) from exc
    db.refresh(invoice)


def get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Optional[Invoice]:
    return db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()


def list_invoices(db: Session, owner_id: int, status: Optional[str] = None) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.owner_id == owner_id)
    if status:
        query = query.filter(Invoice.status == status)
    return query.order_by(Invoice.date.desc(), Invoice.id.desc()).all()


def create_invoice(db: Session, owner: User, payload: InvoiceCreate) -> Invoice:
    """Create a draft invoice.

    Blank issuer fields are seeded from the owner's business settings and, when
    ``client_id`` is given, blank bill-to fields from that client. Values sent
    in the request always win.
    """
    invoice_number = _clean_text(payload.invoice_number) or next_invoice_number(db, owner.id)
    _ensure_number_available(db, owner.id, invoice_number)

    invoice = Invoice(owner_id=owner.id, invoice_number=invoice_number, status="draft")
    _apply_payload(invoice, payload)
    if invoice.date is None:
        invoice.date = local_today()

    if payload.client_id is not None:
        client = db.query(Client).filter(Client.id == payload.client_id, Client.owner_id == owner.id).first()
        if client is None:
            raise ClientNotFound(payload.client_id)
        _fill_blanks(invoice, client.bill_to_fields())

    business = db.query(BusinessSettings).filter(BusinessSettings.owner_id == owner.id).first()
    if business is not None:
        _fill_blanks(invoice, business.from_fields())
        if invoice.notes is None and business.default_invoice_note:
            invoice.notes = business.default_invoice_note

    db.add(invoice)
    _commit(db, invoice)
    logger.info("Invoice created: %s (id=%s, owner=%s, total=%s)", invoice.invoice_number, invoice.id, owner.id, invoice.total)
    return invoice


def update_invoice(db: Session, invoice: Invoice, payload: InvoiceUpdate) -> Invoice:
    """Overwrite every editable field and recompute totals from the submitted rows."""
    invoice_number = payload.invoice_number
    if invoice_number != invoice.invoice_number:
        _ensure_number_available(db, invoice.owner_id, invoice_number, exclude_id=invoice.id)
    invoice.invoice_number = invoice_number
    _apply_payload(invoice, payload)
    _commit(db, invoice)
    logger.info("Invoice updated: %s (id=%s, total=%s)", invoice.invoice_number, invoice.id, invoice.total)
    return invoice


def delete_invoice(db: Session, invoice: Invoice) -> None:
    invoice_id, invoice_number = invoice.id, invoice.invoice_number
    db.delete(invoice)
    db.commit()
    logger.info("Invoice deleted: %s (id=%s)", invoice_number, invoice_id)


def set_status(db: Session, invoice: Invoice, status: str) -> Invoice:
    if status not in INVOICE_STATUSES:
        raise InvalidInvoiceStatus(f"Invalid status '{status}'. Expected one of: {', '.join(INVOICE_STATUSES)}")
    previous = invoice.status
    invoice.status = status
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s status changed: %s -> %s", invoice.id, previous, status)
    return invoice


def ensure_share_token(db: Session, invoice: Invoice) -> str:
    if not invoice.share_token:
        invoice.share_token = secrets.token_urlsafe(32)
        db.commit()
        db.refresh(invoice)
        logger.info("Share link issued for invoice %s", invoice.id)
    return invoice.share_token


def revoke_share_token(db: Session, invoice: Invoice) -> None:
    if invoice.share_token:
        invoice.share_token = None
        db.commit()
        logger.info("Share link revoked for invoice %s", invoice.id)


def get_shared_invoice(db: Session, invoice_id: int, token: Optional[str]) -> Optional[Invoice]:
    """Invoice for a public link, or None when the id or token does not match."""
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None or not invoice.share_token or not token:
        return None
    if not secrets.compare_digest(invoice.share_token.encode(), token.encode()):
        return None
    return invoice


def share_url(invoice: Invoice, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return f"{settings.public_base_url}/invoice/{invoice.id}?token={invoice.share_token}"


def share_pdf_url(invoice: Invoice, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return f"{settings.public_base_url}/invoice/{invoice.id}/pdf?token={invoice.share_token}"


def invoice_document(invoice: Invoice, settings: Optional[Settings] = None) -> InvoiceDocument:
    return build_invoice_document(invoice, format_config(settings))


def send_invoice_email(
    db: Session,
    invoice: Invoice,
    sender: EmailSender,
    settings: Optional[Settings] = None,
) -> OutgoingEmail:
    """Email the invoice to its bill-to address with a public view link.

    A draft becomes ``sent`` only after the transport accepts the message;
    transport errors propagate and leave the status untouched.
    """
    settings = settings or get_settings()
    recipient = _clean_text(invoice.bill_to_email)
    if recipient is None:
        raise MissingRecipient(f"Invoice {invoice.invoice_number} has no bill-to email")

    document = invoice_document(invoice, settings)
    ensure_share_token(db, invoice)
    message = build_invoice_email(
        document,
        to=recipient,
        view_url=share_url(invoice, settings),
        reply_to=_clean_text(invoice.from_email),
        config=format_config(settings),
    )
    sender.send(message)

    if invoice.status == "draft":
        invoice.status = "sent"
        db.commit()
        db.refresh(invoice)
    logger.info("Invoice %s emailed to %s", invoice.invoice_number, recipient)
    return message
