"""HTML rendering of invoice documents for the dashboard and public share page."""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ledgerly.app.services.formatting import DEFAULT_FORMAT, FormatConfig, with_currency
from ledgerly.app.services.invoice_document import InvoiceDocument

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _money_filter(config: FormatConfig):
    def money(formatted: str) -> str:
        return with_currency(formatted, config)

    return money


def render_template(name: str, config: FormatConfig = DEFAULT_FORMAT, **context) -> str:
    template = templates.get_template(name)
    return template.render(money=_money_filter(config), **context)


def render_invoice_html(
    document: InvoiceDocument,
    config: FormatConfig = DEFAULT_FORMAT,
    *,
    public: bool = False,
    pdf_url: Optional[str] = None,
) -> str:
    """Full HTML page for an invoice.

    ``public=True`` is the unauthenticated share view: no owner controls and
    a "Powered by Ledgerly" footer.
    """
    return render_template(
        "invoice_view.html",
        config,
        document=document,
        public=public,
        pdf_url=pdf_url,
    )
