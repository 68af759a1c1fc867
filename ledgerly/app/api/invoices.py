"""Invoice routes for owners."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.invoice import Invoice
from ledgerly.app.models.user import User
from ledgerly.app.schemas.invoice import (
    INVOICE_STATUSES,
    InvoiceCalculateRequest,
    InvoiceCalculateResponse,
    InvoiceCreate,
    InvoiceRead,
    InvoiceSendResult,
    InvoiceStatusUpdate,
    InvoiceUpdate,
    NextInvoiceNumber,
    ShareLinkRead,
)
from ledgerly.app.services.email_delivery import EmailDeliveryError, EmailSender, get_email_sender
from ledgerly.app.services.invoice_document import InvoiceDocument, InvoiceRenderError
from ledgerly.app.services.invoice_html import render_invoice_html
from ledgerly.app.services.invoice_pdf import pdf_filename, render_invoice_pdf
from ledgerly.app.services.invoice_totals import calculate_invoice_totals
from ledgerly.app.services.invoices import (
    ClientNotFound,
    InvalidInvoiceStatus,
    InvalidLineItems,
    InvoiceNumberConflict,
    MissingRecipient,
    create_invoice,
    delete_invoice,
    ensure_share_token,
    format_config,
    get_owned_invoice,
    invoice_document,
    list_invoices,
    next_invoice_number,
    revoke_share_token,
    send_invoice_email,
    set_status,
    share_pdf_url,
    share_url,
    update_invoice,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Invoice:
    invoice = get_owned_invoice(db, invoice_id, owner_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


def build_document_or_422(invoice: Invoice) -> InvoiceDocument:
    try:
        return invoice_document(invoice)
    except InvoiceRenderError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


def pdf_response(invoice: Invoice, document: InvoiceDocument) -> Response:
    rendered = render_invoice_pdf(document, format_config())
    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(invoice.invoice_number)}"'},
    )


@router.post("/calculate", response_model=InvoiceCalculateResponse)
async def calculate_totals(payload: InvoiceCalculateRequest, current_user: User = Depends(get_current_user)):
    totals = calculate_invoice_totals(payload.line_items)
    return InvoiceCalculateResponse(
        subtotal=totals.subtotal,
        total=totals.total,
        balance_due=totals.balance_due,
        line_items=totals.line_items,
    )


@router.get("/next-number", response_model=NextInvoiceNumber)
async def get_next_invoice_number(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return NextInvoiceNumber(invoice_number=next_invoice_number(db, current_user.id))


@router.get("/", response_model=List[InvoiceRead])
async def list_owner_invoices(
    status: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if status is not None and status not in INVOICE_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status filter")
    return list_invoices(db, current_user.id, status=status)


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_owner_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return create_invoice(db, current_user, payload)
    except InvalidLineItems as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except ClientNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    except InvoiceNumberConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(db, invoice_id, current_user.id)


@router.put("/{invoice_id}", response_model=InvoiceRead)
async def update_owner_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    try:
        return update_invoice(db, invoice, payload)
    except InvalidLineItems as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except InvoiceNumberConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_owner_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    delete_invoice(db, invoice)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{invoice_id}/status", response_model=InvoiceRead)
async def update_invoice_status(
    invoice_id: int,
    payload: InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    try:
        return set_status(db, invoice, payload.status)
    except InvalidInvoiceStatus as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/{invoice_id}/document")
async def get_invoice_document(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    return build_document_or_422(invoice).to_dict()


@router.get("/{invoice_id}/view", response_class=HTMLResponse)
async def view_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    document = build_document_or_422(invoice)
    return HTMLResponse(render_invoice_html(document, format_config()))


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    return pdf_response(invoice, build_document_or_422(invoice))


@router.post("/{invoice_id}/share", response_model=ShareLinkRead)
async def share_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    token = ensure_share_token(db, invoice)
    return ShareLinkRead(share_token=token, url=share_url(invoice), pdf_url=share_pdf_url(invoice))


@router.delete("/{invoice_id}/share", status_code=status.HTTP_204_NO_CONTENT)
async def unshare_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    revoke_share_token(db, invoice)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{invoice_id}/send", response_model=InvoiceSendResult)
def send_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    sender: EmailSender = Depends(get_email_sender),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    try:
        message = send_invoice_email(db, invoice, sender)
    except MissingRecipient:
        raise HTTPException(status_code=400, detail="Invoice has no bill-to email address")
    except InvoiceRenderError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except EmailDeliveryError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send invoice email")
    return InvoiceSendResult(message="Invoice sent", sent_to=message.to, status=invoice.status)
