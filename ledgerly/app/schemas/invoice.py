"""Invoice schemas."""

from datetime import date as date_type
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue")

InvoiceTerms = Literal[
    "none",
    "on_receipt",
    "1_day",
    "2_days",
    "3_days",
    "5_days",
    "7_days",
    "14_days",
    "30_days",
    "custom",
]
INVOICE_TERMS = get_args(InvoiceTerms)


class LineItemInput(BaseModel):
    """A line item row as typed into a form; rate and quantity are not trusted."""

    name: Optional[str] = None
    description: Optional[str] = None
    rate: Any = None
    quantity: Any = None


class LineItem(BaseModel):
    """A normalized line item as persisted on an invoice."""

    name: Optional[str] = None
    description: str = ""
    rate: Decimal
    quantity: Decimal
    amount: Decimal

    @model_validator(mode="after")
    def check_amount(self):
        with localcontext() as ctx:
            ctx.prec = 50
            expected = (self.rate * self.quantity).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        if self.amount != expected:
            raise ValueError(f"amount {self.amount} does not match rate x quantity ({expected})")
        return self


class InvoicePayload(BaseModel):
    invoice_name: str = "Invoice"
    date: Optional[date_type] = None
    terms: InvoiceTerms = "none"
    custom_terms: Optional[str] = None

    from_name: Optional[str] = None
    from_email: Optional[EmailStr] = None
    from_address: Optional[str] = None
    from_phone: Optional[str] = None
    from_mobile: Optional[str] = None
    from_fax: Optional[str] = None
    from_website: Optional[str] = None
    from_business_number: Optional[str] = None
    from_owner: Optional[str] = None

    bill_to_name: Optional[str] = None
    bill_to_email: Optional[EmailStr] = None
    bill_to_address: Optional[str] = None
    bill_to_phone: Optional[str] = None
    bill_to_mobile: Optional[str] = None
    bill_to_fax: Optional[str] = None
    bill_to_website: Optional[str] = None
    bill_to_business_number: Optional[str] = None
    bill_to_owner: Optional[str] = None

    line_items: List[LineItemInput] = Field(default_factory=list)
    notes: Optional[str] = None


def _clean_invoice_number(value: str) -> str:
    # Ends up in the email subject and the PDF filename
    if any(ch in value for ch in "\r\n"):
        raise ValueError("invoice_number must be a single line")
    return value.strip()


class InvoiceCreate(InvoicePayload):
    invoice_number: Optional[str] = None
    client_id: Optional[int] = None

    @field_validator("invoice_number")
    @classmethod
    def invoice_number_single_line(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _clean_invoice_number(value)


class InvoiceUpdate(InvoicePayload):
    invoice_number: str

    @field_validator("invoice_number")
    @classmethod
    def invoice_number_not_blank(cls, value: str) -> str:
        value = _clean_invoice_number(value)
        if not value:
            raise ValueError("invoice_number must not be blank")
        return value


class InvoiceStatusUpdate(BaseModel):
    status: str


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    invoice_number: str
    share_token: Optional[str] = None

    invoice_name: str
    date: date_type
    terms: str
    custom_terms: Optional[str] = None
    status: str

    from_name: Optional[str] = None
    from_email: Optional[str] = None
    from_address: Optional[str] = None
    from_phone: Optional[str] = None
    from_mobile: Optional[str] = None
    from_fax: Optional[str] = None
    from_website: Optional[str] = None
    from_business_number: Optional[str] = None
    from_owner: Optional[str] = None

    bill_to_name: Optional[str] = None
    bill_to_email: Optional[str] = None
    bill_to_address: Optional[str] = None
    bill_to_phone: Optional[str] = None
    bill_to_mobile: Optional[str] = None
    bill_to_fax: Optional[str] = None
    bill_to_website: Optional[str] = None
    bill_to_business_number: Optional[str] = None
    bill_to_owner: Optional[str] = None

    line_items: List[LineItem]
    subtotal: Decimal
    total: Decimal
    balance_due: Decimal
    notes: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class InvoiceCalculateRequest(BaseModel):
    line_items: List[LineItemInput] = Field(default_factory=list)


class InvoiceCalculateResponse(BaseModel):
    subtotal: Decimal
    total: Decimal
    balance_due: Decimal
    line_items: List[LineItem]


class NextInvoiceNumber(BaseModel):
    invoice_number: str


class ShareLinkRead(BaseModel):
    share_token: str
    url: str
    pdf_url: str


class InvoiceSendResult(BaseModel):
    message: str
    sent_to: str
    status: str
