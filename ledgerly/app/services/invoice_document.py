"""Renderer-agnostic invoice document tree.

Every output target (screen, public share page, PDF, email) renders from the
``InvoiceDocument`` built here. Amounts arrive pre-formatted and line item
labels are resolved once, so renderers only lay out what they are given.
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, List, Optional, Tuple

from ledgerly.app.schemas.invoice import LineItem
from ledgerly.app.services.formatting import (
    DEFAULT_FORMAT,
    FormatConfig,
    format_date,
    format_money,
    format_quantity,
    format_status,
    format_terms,
)

logger = logging.getLogger(__name__)

# Party fields after the name, in display order, with their row label
PARTY_FIELD_LABELS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("address", None),
    ("email", None),
    ("phone", "Phone"),
    ("mobile", "Mobile"),
    ("fax", "Fax"),
    ("website", None),
    ("business_number", "Business #"),
    ("owner", "Owner"),
)

PARTY_HEADINGS = {"from": "From", "bill_to": "Bill To"}


class InvoiceRenderError(Exception):
    """Raised when an invoice lacks the data every rendered copy must show."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__("Invoice cannot be rendered, missing: " + ", ".join(missing))


@dataclass(frozen=True)
class HeaderSection:
    kind: ClassVar[str] = "header"

    title: str
    invoice_number: str
    invoice_name: str
    date: str
    terms: Optional[str]
    status: str


@dataclass(frozen=True)
class PartyField:
    label: Optional[str]
    value: str


@dataclass(frozen=True)
class PartyBlock:
    kind: ClassVar[str] = "party"

    role: str
    heading: str
    name: Optional[str]
    fields: Tuple[PartyField, ...]


@dataclass(frozen=True)
class LineItemRow:
    label: str
    secondary: Optional[str]
    rate: str
    quantity: str
    amount: str


@dataclass(frozen=True)
class LineItemsTable:
    kind: ClassVar[str] = "line_items"

    rows: Tuple[LineItemRow, ...]


@dataclass(frozen=True)
class TotalsBlock:
    kind: ClassVar[str] = "totals"

    subtotal: str
    total: str
    balance_due: str


@dataclass(frozen=True)
class NotesBlock:
    kind: ClassVar[str] = "notes"

    text: str


@dataclass(frozen=True)
class InvoiceDocument:
    header: HeaderSection
    issuer: PartyBlock
    bill_to: PartyBlock
    line_items: LineItemsTable
    totals: TotalsBlock
    notes: Optional[NotesBlock] = None

    @property
    def sections(self) -> list:
        ordered = [self.header, self.issuer, self.bill_to, self.line_items, self.totals]
        if self.notes is not None:
            ordered.append(self.notes)
        return ordered

    def to_dict(self) -> dict:
        return {"sections": [{"type": section.kind, **asdict(section)} for section in self.sections]}


def _value(invoice: Any, key: str) -> Any:
    if isinstance(invoice, Mapping):
        return invoice.get(key)
    return getattr(invoice, key, None)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_item_label(name: Optional[str], description: Optional[str]) -> Tuple[str, Optional[str]]:
    """Return ``(label, secondary)`` for a line item.

    A distinct name becomes the label with the description underneath; a name
    equal to the description, or either field alone, yields a single label.
    """
    name = _text(name)
    description = _text(description)
    if name and description and name != description:
        return name, description
    return name or description or "", None


def build_party_block(invoice: Any, role: str) -> PartyBlock:
    prefix = f"{role}_"
    fields = []
    for field_name, label in PARTY_FIELD_LABELS:
        value = _text(_value(invoice, prefix + field_name))
        if value is not None:
            fields.append(PartyField(label=label, value=value))
    return PartyBlock(
        role=role,
        heading=PARTY_HEADINGS[role],
        name=_text(_value(invoice, prefix + "name")),
        fields=tuple(fields),
    )


def build_line_item_row(item: LineItem, config: FormatConfig = DEFAULT_FORMAT) -> LineItemRow:
    label, secondary = resolve_item_label(item.name, item.description)
    return LineItemRow(
        label=label,
        secondary=secondary,
        rate=format_money(item.rate, config),
        quantity=format_quantity(item.quantity, config),
        amount=format_money(item.amount, config),
    )


def _missing_required(invoice: Any) -> List[str]:
    missing = []
    if not _text(_value(invoice, "invoice_number")):
        missing.append("invoice_number")
    if not (_text(_value(invoice, "from_name")) or _text(_value(invoice, "bill_to_name"))):
        missing.append("from_name or bill_to_name")
    if _value(invoice, "date") is None:
        missing.append("date")
    return missing


def build_invoice_document(invoice: Any, config: FormatConfig = DEFAULT_FORMAT) -> InvoiceDocument:
    """Build the document tree for a persisted invoice (ORM row or mapping).

    Totals come from the stored record and are not recomputed here.
    """
    missing = _missing_required(invoice)
    if missing:
        logger.warning("Refusing to render invoice %s: missing %s", _value(invoice, "id"), ", ".join(missing))
        raise InvoiceRenderError(missing)

    items = [LineItem.model_validate(raw) for raw in (_value(invoice, "line_items") or [])]

    header = HeaderSection(
        title="INVOICE",
        invoice_number=_text(_value(invoice, "invoice_number")),
        invoice_name=_text(_value(invoice, "invoice_name")) or "",
        date=format_date(_value(invoice, "date"), config),
        terms=format_terms(_value(invoice, "terms"), _value(invoice, "custom_terms")),
        status=format_status(_value(invoice, "status")),
    )
    notes = _text(_value(invoice, "notes"))
    return InvoiceDocument(
        header=header,
        issuer=build_party_block(invoice, "from"),
        bill_to=build_party_block(invoice, "bill_to"),
        line_items=LineItemsTable(rows=tuple(build_line_item_row(item, config) for item in items)),
        totals=TotalsBlock(
            subtotal=format_money(_value(invoice, "subtotal"), config),
            total=format_money(_value(invoice, "total"), config),
            balance_due=format_money(_value(invoice, "balance_due"), config),
        ),
        notes=NotesBlock(text=notes) if notes else None,
    )
