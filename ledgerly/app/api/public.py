"""Unauthenticated invoice share links.

Every failure is a plain 404 so a link never reveals whether an invoice exists.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ledgerly.app.api.invoices import pdf_response
from ledgerly.app.db.session import get_db
from ledgerly.app.models.invoice import Invoice
from ledgerly.app.services.invoice_document import InvoiceDocument, InvoiceRenderError
from ledgerly.app.services.invoice_html import render_invoice_html
from ledgerly.app.services.invoices import format_config, get_shared_invoice, invoice_document, share_pdf_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoice", tags=["public"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")


def _shared_or_404(db: Session, invoice_id: int, token: str | None) -> Invoice:
    invoice = get_shared_invoice(db, invoice_id, token)
    if invoice is None:
        raise _not_found()
    return invoice


def _document_or_404(invoice: Invoice) -> InvoiceDocument:
    try:
        return invoice_document(invoice)
    except InvoiceRenderError as exc:
        logger.warning("Shared invoice %s cannot be rendered: %s", invoice.id, exc)
        raise _not_found()


@router.get("/{invoice_id}", response_class=HTMLResponse)
async def view_shared_invoice(invoice_id: int, token: str | None = None, db: Session = Depends(get_db)):
    invoice = _shared_or_404(db, invoice_id, token)
    document = _document_or_404(invoice)
    return HTMLResponse(render_invoice_html(document, format_config(), public=True, pdf_url=share_pdf_url(invoice)))


@router.get("/{invoice_id}/pdf")
def download_shared_invoice_pdf(invoice_id: int, token: str | None = None, db: Session = Depends(get_db)):
    invoice = _shared_or_404(db, invoice_id, token)
    return pdf_response(invoice, _document_or_404(invoice))
