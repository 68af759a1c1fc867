from datetime import date
from decimal import Decimal

from ledgerly.app.services.formatting import FormatConfig
from ledgerly.app.services.invoice_document import build_invoice_document
from ledgerly.app.services.invoice_email import build_invoice_email
from ledgerly.app.services.invoice_html import render_invoice_html
from ledgerly.app.services.invoice_pdf import pdf_filename, render_invoice_pdf
from ledgerly.app.services.invoice_totals import calculate_invoice_totals


def make_invoice(item_count=2, **overrides):
    rows = [
        {"name": f"Service item {n:02d}", "description": f"Work package {n:02d}", "rate": "25.50", "quantity": n}
        for n in range(1, item_count + 1)
    ]
    totals = calculate_invoice_totals(rows)
    invoice = {
        "id": 7,
        "invoice_number": "INV0042",
        "invoice_name": "Monthly services",
        "date": date(2025, 11, 6),
        "terms": "on_receipt",
        "status": "sent",
        "from_name": "Acme Studio",
        "from_email": "billing@acme.com",
        "bill_to_name": "Globex <Corp> & Sons",
        "bill_to_email": "ap@globex.com",
        "line_items": [item.model_dump(mode="json") for item in totals.line_items],
        "subtotal": totals.subtotal,
        "total": totals.total,
        "balance_due": totals.balance_due,
        "notes": "Payment by bank transfer",
    }
    invoice.update(overrides)
    return invoice


def test_screen_html_contains_totals_and_escapes_names():
    document = build_invoice_document(make_invoice())
    html = render_invoice_html(document)
    assert "INV0042" in html
    assert "Balance Due:" in html
    assert "$76.50" in html
    assert "Globex &lt;Corp&gt; &amp; Sons" in html
    assert "Powered by Ledgerly" not in html
    assert "Download PDF" not in html


def test_public_html_has_footer_and_pdf_link():
    document = build_invoice_document(make_invoice())
    html = render_invoice_html(document, public=True, pdf_url="http://testserver/invoice/7/pdf?token=abc")
    assert "Powered by Ledgerly" in html
    assert "Download PDF" in html
    assert "/invoice/7/pdf?token=abc" in html


def test_html_uses_configured_currency():
    document = build_invoice_document(make_invoice(), FormatConfig(currency_symbol="£"))
    html = render_invoice_html(document, FormatConfig(currency_symbol="£"))
    assert "£76.50" in html


def test_single_page_pdf():
    rendered = render_invoice_pdf(build_invoice_document(make_invoice()), compress=False)
    assert rendered.content.startswith(b"%PDF")
    assert rendered.page_count == 1
    assert rendered.totals_page == 1
    assert rendered.row_count == 2


def test_long_invoice_paginates_with_totals_once_on_last_page():
    invoice = make_invoice(item_count=40)
    document = build_invoice_document(invoice)
    rendered = render_invoice_pdf(document, compress=False)

    assert rendered.row_count == 40
    assert len(document.line_items.rows) == 40
    assert rendered.page_count > 1
    assert rendered.totals_page == rendered.page_count
    assert rendered.content.count(b"Balance Due") == 1
    assert b"Service item 01" in rendered.content
    assert b"Service item 40" in rendered.content


def test_empty_invoice_pdf_renders():
    rendered = render_invoice_pdf(build_invoice_document(make_invoice(item_count=0)), compress=False)
    assert rendered.row_count == 0
    assert rendered.page_count == 1
    assert b"No line items" in rendered.content


def test_pdf_filename_is_header_safe():
    assert pdf_filename("INV0042") == "INV0042.pdf"
    assert pdf_filename('bad"name\r\n') == "badname.pdf"
    assert pdf_filename("") == "invoice.pdf"


def test_invoice_email_bodies():
    document = build_invoice_document(make_invoice())
    message = build_invoice_email(
        document,
        to="ap@globex.com",
        view_url="http://testserver/invoice/7?token=abc",
        reply_to="billing@acme.com",
    )
    assert message.subject == "Invoice INV0042"
    assert message.to == "ap@globex.com"
    assert message.reply_to == "billing@acme.com"
    assert "http://testserver/invoice/7?token=abc" in message.html_body
    assert "http://testserver/invoice/7?token=abc" in message.text_body
    assert "Balance Due: $76.50" in message.text_body
    assert "Terms: On Receipt" in message.text_body
    assert "Globex &lt;Corp&gt; &amp; Sons" in message.html_body
    assert "Acme Studio" in message.text_body


def test_line_item_totals_for_fixture():
    totals = calculate_invoice_totals(make_invoice(item_count=40)["line_items"])
    assert totals.subtotal == Decimal("25.50") * sum(range(1, 41))
