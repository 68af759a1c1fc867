"""Paginated PDF rendering of invoice documents (no DB access)."""

import io
import logging
from dataclasses import dataclass
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import Flowable

from ledgerly.app.services.formatting import DEFAULT_FORMAT, FormatConfig, with_currency
from ledgerly.app.services.invoice_document import InvoiceDocument, PartyBlock

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 18 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

DARK = colors.HexColor("#1f2937")
GRAY = colors.HexColor("#6b7280")
BORDER = colors.HexColor("#e5e7eb")
HEADER_BG = colors.HexColor("#f3f4f6")
GREEN = colors.HexColor("#059669")

_base = getSampleStyleSheet()["Normal"]
TITLE = ParagraphStyle("InvoiceTitle", parent=_base, fontName="Helvetica-Bold", fontSize=22, leading=26, textColor=DARK)
SUBTLE = ParagraphStyle("Subtle", parent=_base, fontSize=10, leading=13, textColor=GRAY)
META = ParagraphStyle("Meta", parent=_base, fontSize=10, leading=14, alignment=TA_RIGHT, textColor=DARK)
SECTION = ParagraphStyle("Section", parent=_base, fontName="Helvetica-Bold", fontSize=8, leading=11, textColor=GRAY)
PARTY_NAME = ParagraphStyle("PartyName", parent=_base, fontName="Helvetica-Bold", fontSize=11, leading=14, textColor=DARK)
PARTY_LINE = ParagraphStyle("PartyLine", parent=_base, fontSize=9.5, leading=12.5, textColor=DARK)
ITEM_LABEL = ParagraphStyle("ItemLabel", parent=_base, fontName="Helvetica-Bold", fontSize=10, leading=12, textColor=DARK)
ITEM_DESCRIPTION = ParagraphStyle("ItemDescription", parent=_base, fontSize=8.5, leading=11, textColor=GRAY)
NOTES = ParagraphStyle("Notes", parent=_base, fontSize=9, leading=13, textColor=GRAY)

# Description, rate, quantity, amount
LINE_ITEM_COLUMNS = [78 * mm, 36 * mm, 24 * mm, 36 * mm]


@dataclass(frozen=True)
class RenderedPdf:
    content: bytes
    page_count: int
    totals_page: int
    row_count: int


class _SectionMarker(Flowable):
    """Zero-size flowable that records the page a section was placed on."""

    def __init__(self, name: str):
        Flowable.__init__(self)
        self.name = name

    def wrap(self, availWidth, availHeight):
        return 0, 0

    def draw(self):
        pass


class InvoiceDocTemplate(SimpleDocTemplate):
    def __init__(self, filename, **kw):
        SimpleDocTemplate.__init__(self, filename, **kw)
        self.section_pages = {}
        self.page_count = 0

    def afterPage(self):
        self.page_count = self.page

    def afterFlowable(self, flowable):
        if isinstance(flowable, _SectionMarker):
            self.section_pages[flowable.name] = self.page


def pdf_filename(invoice_number: str) -> str:
    cleaned = "".join(ch for ch in invoice_number if ch.isascii() and ch.isprintable() and ch not in '"\\')
    return f"{cleaned or 'invoice'}.pdf"


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text).replace("\n", "<br/>"), style)


def _header(document: InvoiceDocument) -> Table:
    header = document.header
    left = [_p(header.title, TITLE), _p(header.invoice_number, SUBTLE)]
    if header.invoice_name:
        left.append(_p(header.invoice_name, SUBTLE))
    right = [Paragraph(f"<b>Date:</b> {escape(header.date)}", META)]
    if header.terms:
        right.append(Paragraph(f"<b>Terms:</b> {escape(header.terms)}", META))
    table = Table([[left, right]], colWidths=[CONTENT_WIDTH / 2] * 2)
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]
        )
    )
    return table


def _party_cell(block: PartyBlock) -> list:
    cell = [_p(block.heading.upper(), SECTION), Spacer(1, 2 * mm)]
    if block.name:
        cell.append(_p(block.name, PARTY_NAME))
    for field in block.fields:
        text = f"{field.label}: {field.value}" if field.label else field.value
        cell.append(_p(text, PARTY_LINE))
    return cell


def _parties(document: InvoiceDocument) -> Table:
    table = Table(
        [[_party_cell(document.issuer), _party_cell(document.bill_to)]],
        colWidths=[CONTENT_WIDTH / 2] * 2,
    )
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ]
        )
    )
    return table


def _line_items(document: InvoiceDocument, config: FormatConfig) -> Table:
    data = [["Description", "Rate", "Qty", "Amount"]]
    for row in document.line_items.rows:
        description = [_p(row.label, ITEM_LABEL)]
        if row.secondary:
            description.append(_p(row.secondary, ITEM_DESCRIPTION))
        data.append([description, with_currency(row.rate, config), row.quantity, with_currency(row.amount, config)])

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("TEXTCOLOR", (0, 0), (-1, -1), DARK),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]
    if len(data) == 1:
        data.append([_p("No line items", NOTES), "", "", ""])
        style.append(("SPAN", (0, 1), (-1, 1)))
    style.append(("LINEBELOW", (0, 1), (-1, -1), 0.5, BORDER))

    # Header row repeats on every page the table flows onto
    table = Table(data, colWidths=LINE_ITEM_COLUMNS, repeatRows=1)
    table.setStyle(TableStyle(style))
    return table


def _totals(document: InvoiceDocument, config: FormatConfig) -> Table:
    totals = document.totals
    data = [
        ["Subtotal:", with_currency(totals.subtotal, config)],
        ["Total:", with_currency(totals.total, config)],
        ["Balance Due:", with_currency(totals.balance_due, config)],
    ]
    table = Table(data, colWidths=[40 * mm, 36 * mm], hAlign="RIGHT")
    table.setStyle(
        TableStyle(
            [
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("TEXTCOLOR", (0, 0), (0, 0), GRAY),
                ("FONTNAME", (1, 0), (1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, 1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 1), (-1, -1), 12),
                ("LINEABOVE", (0, 1), (-1, 1), 0.75, BORDER),
                ("TEXTCOLOR", (0, 2), (-1, 2), GREEN),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ]
        )
    )
    return table


def draw_page_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(GRAY)
    canvas.drawCentredString(PAGE_WIDTH / 2, 10 * mm, f"Generated by Ledgerly - Page {doc.page}")
    canvas.restoreState()


def render_invoice_pdf(document: InvoiceDocument, config: FormatConfig = DEFAULT_FORMAT, *, compress: bool = True) -> RenderedPdf:
    """Render an invoice document to A4 PDF bytes.

    Line items flow across as many pages as needed. Notes come before the
    totals so the totals block is always the last thing on the last page.
    """
    buf = io.BytesIO()
    doc = InvoiceDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN + 6 * mm,
        title=f"Invoice {document.header.invoice_number}",
        author=document.issuer.name or "",
        creator="Ledgerly",
        invariant=1,
        pageCompression=1 if compress else 0,
    )

    story = [
        _header(document),
        Spacer(1, 8 * mm),
        _parties(document),
        Spacer(1, 8 * mm),
        _line_items(document, config),
        Spacer(1, 6 * mm),
    ]
    if document.notes:
        story.extend([_p("NOTES", SECTION), Spacer(1, 2 * mm), _p(document.notes.text, NOTES), Spacer(1, 6 * mm)])
    story.append(KeepTogether([_totals(document, config), _SectionMarker("totals")]))

    doc.build(story, onFirstPage=draw_page_footer, onLaterPages=draw_page_footer)
    content = buf.getvalue()
    buf.close()

    rendered = RenderedPdf(
        content=content,
        page_count=doc.page_count,
        totals_page=doc.section_pages.get("totals", 0),
        row_count=len(document.line_items.rows),
    )
    logger.info(
        "Invoice PDF generated: %s (%d page(s), %d row(s))",
        document.header.invoice_number,
        rendered.page_count,
        rendered.row_count,
    )
    return rendered
