"""Invoice totals calculator.

Runs on every edit of an invoice form, so it is deliberately lenient: any
rate or quantity that cannot be read as a number falls back to a default
instead of raising. The returned rows carry the rounded amount that gets
persisted, and the totals are summed from those rounded amounts.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, List

from ledgerly.app.schemas.invoice import LineItem

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_RATE = Decimal("0")
DEFAULT_QUANTITY = Decimal("1")

# Largest magnitude the calculator can multiply and quantize at its working
# precision; storage limits are checked separately when an invoice is saved
MAX_INPUT = Decimal("1e20")

_STRIP_CHARS = ("$", ",", " ", "\u00a0")


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    total: Decimal
    balance_due: Decimal
    line_items: List[LineItem] = field(default_factory=list)


def round2(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 50
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_decimal(value: Any, default: Decimal) -> Decimal:
    """Read ``value`` as a Decimal, returning ``default`` for anything unusable.

    Unusable means empty, unparseable, NaN, infinite, or at least ``MAX_INPUT``
    in magnitude. Large but well-formed amounts are returned as given.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    else:
        text = str(value).strip()
        for ch in _STRIP_CHARS:
            text = text.replace(ch, "")
        if not text:
            return default
        try:
            parsed = Decimal(text)
        except (InvalidOperation, ValueError):
            return default
    if not parsed.is_finite() or abs(parsed) >= MAX_INPUT:
        return default
    return parsed


def _row_value(row: Any, key: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_line_item(row: Any) -> LineItem:
    rate = parse_decimal(_row_value(row, "rate"), DEFAULT_RATE)
    quantity = parse_decimal(_row_value(row, "quantity"), DEFAULT_QUANTITY)
    with localcontext() as ctx:
        ctx.prec = 50
        amount = round2(rate * quantity)
    name = _clean_text(_row_value(row, "name")) or None
    return LineItem(
        name=name,
        description=_clean_text(_row_value(row, "description")),
        rate=rate,
        quantity=quantity,
        amount=amount,
    )


def calculate_invoice_totals(rows: Iterable[Any] | None) -> InvoiceTotals:
    """Normalize form rows and derive subtotal, total and balance due."""
    line_items = [normalize_line_item(row) for row in (rows or [])]
    with localcontext() as ctx:
        ctx.prec = 50
        subtotal = round2(sum((item.amount for item in line_items), ZERO))
    # No tax, discount or payment model: total and balance due mirror the subtotal
    total = subtotal
    balance_due = total
    return InvoiceTotals(subtotal=subtotal, total=total, balance_due=balance_due, line_items=line_items)
