"""Reporting endpoints."""

from datetime import date
from typing import Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ledgerly.app.core.time import local_today, start_of_year
from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.user import User
from ledgerly.app.schemas.reports import FinancialReport, TaxSummary
from ledgerly.app.services.invoices import format_config
from ledgerly.app.services.report_pdf import render_financial_report_pdf
from ledgerly.app.services.reports import (
    build_financial_report,
    build_tax_summary,
    financial_report_csv,
    financial_report_filename,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def _date_range(start_date: date | None, end_date: date | None) -> Tuple[date, date]:
    """Default to the year to date; reject inverted ranges."""
    end = end_date or local_today()
    start = start_date or start_of_year(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    return start, end


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/tax-summary", response_model=TaxSummary)
async def get_tax_summary(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    start, end = _date_range(start_date, end_date)
    return build_tax_summary(db, current_user.id, start, end)


@router.get("/financial", response_model=FinancialReport)
async def get_financial_report(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    start, end = _date_range(start_date, end_date)
    return build_financial_report(db, current_user.id, start, end)


@router.get("/financial.csv", response_class=Response)
async def export_financial_report_csv(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    start, end = _date_range(start_date, end_date)
    report = build_financial_report(db, current_user.id, start, end)
    return Response(
        content=financial_report_csv(report),
        media_type="text/csv",
        headers=_attachment(financial_report_filename(report, "csv")),
    )


@router.get("/financial.pdf", response_class=Response)
def export_financial_report_pdf(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    start, end = _date_range(start_date, end_date)
    report = build_financial_report(db, current_user.id, start, end)
    return Response(
        content=render_financial_report_pdf(report, format_config()),
        media_type="application/pdf",
        headers=_attachment(financial_report_filename(report, "pdf")),
    )
