"""Display formatting shared by every invoice renderer.

All functions are pure and take an explicit ``FormatConfig`` so output does
not depend on the process locale.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ledgerly.app.services.invoice_totals import ZERO, parse_decimal, round2

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

TERMS_LABELS = {
    "on_receipt": "On Receipt",
    "1_day": "Next Day",
}

_DAYS_TERMS = re.compile(r"^(\d+)_days$")


@dataclass(frozen=True)
class FormatConfig:
    thousands_separator: str = ","
    decimal_separator: str = "."
    # Fields: year, month, day, mm, dd, month_name, month_abbr
    date_pattern: str = "{month}/{day}/{year}"
    currency_symbol: str = "$"


DEFAULT_FORMAT = FormatConfig()


def _as_money(value: Any) -> Decimal:
    return round2(parse_decimal(value, ZERO))


def _swap_separators(text: str, config: FormatConfig) -> str:
    return (
        text.replace(",", "\0")
        .replace(".", config.decimal_separator)
        .replace("\0", config.thousands_separator)
    )


def format_money(value: Any, config: FormatConfig = DEFAULT_FORMAT) -> str:
    """Two decimals, grouped thousands, no currency symbol."""
    amount = _as_money(value)
    text = _swap_separators(f"{abs(amount):,.2f}", config)
    return f"-{text}" if amount < 0 else text


def format_quantity(value: Any, config: FormatConfig = DEFAULT_FORMAT) -> str:
    quantity = round2(parse_decimal(value, Decimal("1")))
    if quantity == 0:
        quantity = abs(quantity)
    return _swap_separators(f"{quantity:.2f}", config)


def with_currency(formatted: str, config: FormatConfig = DEFAULT_FORMAT) -> str:
    """Prefix an already formatted amount with the currency symbol, keeping the sign first."""
    if formatted.startswith("-"):
        return f"-{config.currency_symbol}{formatted[1:]}"
    return f"{config.currency_symbol}{formatted}"


def parse_local_date(value: Any) -> date:
    """Read a calendar date without going through a UTC timestamp.

    ``"2025-11-06"`` is always November 6th, whatever the server timezone.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValueError("date is required")
    text = str(value).strip()
    return date.fromisoformat(text[:10])


def format_date(value: Any, config: FormatConfig = DEFAULT_FORMAT) -> str:
    day = parse_local_date(value)
    month_name = MONTH_NAMES[day.month - 1]
    return config.date_pattern.format(
        year=day.year,
        month=day.month,
        day=day.day,
        mm=f"{day.month:02d}",
        dd=f"{day.day:02d}",
        month_name=month_name,
        month_abbr=month_name[:3],
    )


def format_terms(terms: Optional[str], custom_terms: Optional[str] = None) -> Optional[str]:
    """Payment terms label, or None when the invoice carries no terms."""
    value = (terms or "").strip()
    if not value or value == "none":
        return None
    if value == "custom":
        return (custom_terms or "").strip() or "Custom"
    if value in TERMS_LABELS:
        return TERMS_LABELS[value]
    match = _DAYS_TERMS.match(value)
    if match:
        return f"{int(match.group(1))} Days"
    # Older rows stored custom terms text directly
    return value.replace("_", " ")


def format_status(status: Optional[str]) -> str:
    return (status or "draft").replace("_", " ").title()
