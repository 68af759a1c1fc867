from decimal import Decimal

import pytest

from ledgerly.app.services.invoice_totals import (
    calculate_invoice_totals,
    normalize_line_item,
    parse_decimal,
    round2,
)


def test_two_item_scenario():
    totals = calculate_invoice_totals(
        [
            {"description": "Design", "rate": 100, "quantity": 2},
            {"description": "Hosting", "rate": 49.99, "quantity": 1},
        ]
    )
    assert [item.amount for item in totals.line_items] == [Decimal("200.00"), Decimal("49.99")]
    assert totals.subtotal == Decimal("249.99")
    assert totals.total == Decimal("249.99")
    assert totals.balance_due == Decimal("249.99")


def test_empty_rows_give_zero_totals():
    for rows in ([], None):
        totals = calculate_invoice_totals(rows)
        assert totals.subtotal == Decimal("0.00")
        assert totals.total == Decimal("0.00")
        assert totals.balance_due == Decimal("0.00")
        assert totals.line_items == []


@pytest.mark.parametrize("raw", ["", "abc", None, "  ", "NaN", "Infinity", "1e400", True])
def test_malformed_values_fall_back_to_defaults(raw):
    item = normalize_line_item({"description": "Row", "rate": raw, "quantity": raw})
    assert item.rate == Decimal("0")
    assert item.quantity == Decimal("1")
    assert item.amount == Decimal("0.00")


def test_currency_strings_are_parsed():
    item = normalize_line_item({"description": "Retainer", "rate": "$1,200.50", "quantity": "2"})
    assert item.rate == Decimal("1200.50")
    assert item.amount == Decimal("2401.00")


def test_amount_rounds_half_up():
    item = normalize_line_item({"description": "Hours", "rate": "0.125", "quantity": "1"})
    assert item.amount == Decimal("0.13")
    assert round2(Decimal("2.675")) == Decimal("2.68")


def test_negative_values_are_accepted():
    totals = calculate_invoice_totals(
        [
            {"description": "Work", "rate": "100", "quantity": "1"},
            {"description": "Credit", "rate": "-25.50", "quantity": "1"},
        ]
    )
    assert totals.subtotal == Decimal("74.50")


def test_subtotal_is_sum_of_rounded_amounts_in_any_order():
    rows = [
        {"description": "a", "rate": "0.333", "quantity": "3"},
        {"description": "b", "rate": "10.005", "quantity": "1"},
        {"description": "c", "rate": "7.10", "quantity": "0.5"},
    ]
    forward = calculate_invoice_totals(rows)
    backward = calculate_invoice_totals(list(reversed(rows)))
    expected = round2(sum((round2(Decimal(r["rate"]) * Decimal(r["quantity"])) for r in rows), Decimal("0")))
    assert forward.subtotal == expected
    assert backward.subtotal == expected


def test_calculator_is_idempotent_on_its_output():
    first = calculate_invoice_totals(
        [{"name": "Consulting", "description": "10 hrs", "rate": "50", "quantity": "10"}]
    )
    second = calculate_invoice_totals(first.line_items)
    assert second == first


def test_parse_decimal_keeps_large_amounts_and_rejects_unworkable_ones():
    assert parse_decimal("1000000000000", Decimal("0")) == Decimal("1000000000000")
    assert parse_decimal("$1,000,000,000,000.50", Decimal("0")) == Decimal("1000000000000.50")
    assert parse_decimal("1e25", Decimal("7")) == Decimal("7")
    assert parse_decimal(12.5, Decimal("0")) == Decimal("12.5")
