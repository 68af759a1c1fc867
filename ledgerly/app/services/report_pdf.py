"""PDF export of the financial report."""

import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ledgerly.app.schemas.reports import FinancialReport
from ledgerly.app.services.formatting import DEFAULT_FORMAT, FormatConfig, format_date, format_money, format_status, with_currency
from ledgerly.app.services.invoice_pdf import (
    BORDER,
    CONTENT_WIDTH,
    DARK,
    HEADER_BG,
    MARGIN,
    SECTION,
    SUBTLE,
    TITLE,
    draw_page_footer,
)

logger = logging.getLogger(__name__)

TOP_CATEGORIES = 10


def category_label(category: str) -> str:
    return category.replace("_", " ").strip().title() or "Other"


def _money(value, config: FormatConfig) -> str:
    return with_currency(format_money(value, config), config)


def _section(title: str, table: Table) -> KeepTogether:
    return KeepTogether([Paragraph(title.upper(), SECTION), Spacer(1, 2 * mm), table, Spacer(1, 7 * mm)])


def _grid(data, col_widths, *, footer: bool = False) -> Table:
    table = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9.5),
        ("TEXTCOLOR", (0, 0), (-1, -1), DARK),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, BORDER),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    if footer:
        style += [
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("LINEABOVE", (0, -1), (-1, -1), 1, DARK),
        ]
    table.setStyle(TableStyle(style))
    return table


def _summary(report: FinancialReport, config: FormatConfig) -> Table:
    data = [
        ["Measure", "Amount"],
        ["Total income", _money(report.total_income, config)],
        ["Total expenses", _money(report.total_expenses, config)],
        ["Net profit", _money(report.net_profit, config)],
        ["Pending (unpaid)", _money(report.total_pending, config)],
        ["Average paid invoice", _money(report.average_invoice, config)],
        ["Average expense", _money(report.average_expense, config)],
    ]
    return _grid(data, [CONTENT_WIDTH * 0.6, CONTENT_WIDTH * 0.4])


def _monthly(report: FinancialReport, config: FormatConfig) -> Table:
    data = [["Month", "Income", "Expenses", "Profit"]]
    for month in report.monthly:
        data.append(
            [month.label, _money(month.income, config), _money(month.expenses, config), _money(month.profit, config)]
        )
    data.append(
        [
            "Total",
            _money(report.total_income, config),
            _money(report.total_expenses, config),
            _money(report.net_profit, config),
        ]
    )
    return _grid(data, [CONTENT_WIDTH * 0.4] + [CONTENT_WIDTH * 0.2] * 3, footer=True)


def _statuses(report: FinancialReport) -> Table:
    data = [["Status", "Invoices"]]
    data += [[format_status(status), str(count)] for status, count in report.invoices_by_status.items()]
    return _grid(data, [CONTENT_WIDTH * 0.6, CONTENT_WIDTH * 0.4])


def _categories(report: FinancialReport, config: FormatConfig) -> Table:
    data = [["Category", "Count", "Total"]]
    for category, entry in list(report.expenses_by_category.items())[:TOP_CATEGORIES]:
        data.append([category_label(category), str(entry.count), _money(entry.total, config)])
    return _grid(data, [CONTENT_WIDTH * 0.5, CONTENT_WIDTH * 0.2, CONTENT_WIDTH * 0.3])


def render_financial_report_pdf(report: FinancialReport, config: FormatConfig = DEFAULT_FORMAT, *, compress: bool = True) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN + 6 * mm,
        title="Financial Report",
        creator="Ledgerly",
        invariant=1,
        pageCompression=1 if compress else 0,
    )
    period = f"Period: {format_date(report.start_date, config)} - {format_date(report.end_date, config)}"
    story = [
        Paragraph("Financial Report", TITLE),
        Spacer(1, 2 * mm),
        Paragraph(period, SUBTLE),
        Spacer(1, 8 * mm),
        _section("Summary", _summary(report, config)),
    ]
    if report.monthly:
        story.append(_section("Monthly breakdown", _monthly(report, config)))
    story.append(_section("Invoice status", _statuses(report)))
    if report.expenses_by_category:
        story.append(_section("Expense categories", _categories(report, config)))

    doc.build(story, onFirstPage=draw_page_footer, onLaterPages=draw_page_footer)
    content = buf.getvalue()
    buf.close()
    logger.info("Financial report PDF generated: %s to %s", report.start_date, report.end_date)
    return content
