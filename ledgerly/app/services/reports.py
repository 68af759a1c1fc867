"""Financial and tax reporting over invoices, expenses and mileage."""

import csv
import io
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from ledgerly.app.models.expense import Expense
from ledgerly.app.models.invoice import Invoice
from ledgerly.app.models.mileage import MileageEntry
from ledgerly.app.schemas.invoice import INVOICE_STATUSES
from ledgerly.app.schemas.reports import CategoryTotal, FinancialReport, MonthlyBreakdown, TaxSummary
from ledgerly.app.services.invoice_totals import ZERO, round2

# Simplified flat rates; real liability depends on bracket and credits
SELF_EMPLOYMENT_TAX_RATE = Decimal("0.153")
INCOME_TAX_RATE = Decimal("0.22")
UNCATEGORIZED = "uncategorized"
OTHER_CATEGORY = "other"


def _money(value) -> Decimal:
    return Decimal(str(value)) if value is not None else ZERO


def build_tax_summary(db: Session, owner_id: int, start_date: date, end_date: date) -> TaxSummary:
    """Summarize income and deductions dated within ``[start_date, end_date]``."""
    paid_totals = [
        _money(total)
        for (total,) in db.query(Invoice.total)
        .filter(
            Invoice.owner_id == owner_id,
            Invoice.status == "paid",
            Invoice.date >= start_date,
            Invoice.date <= end_date,
        )
        .all()
    ]
    expenses = (
        db.query(Expense)
        .filter(
            Expense.owner_id == owner_id,
            Expense.is_tax_deductible.is_(True),
            Expense.date >= start_date,
            Expense.date <= end_date,
        )
        .all()
    )
    trips = (
        db.query(MileageEntry)
        .filter(
            MileageEntry.owner_id == owner_id,
            MileageEntry.date >= start_date,
            MileageEntry.date <= end_date,
        )
        .all()
    )

    total_income = round2(sum(paid_totals, ZERO))

    by_category = {}
    for expense in expenses:
        key = (expense.tax_category or "").strip() or UNCATEGORIZED
        count, subtotal = by_category.get(key, (0, ZERO))
        by_category[key] = (count + 1, subtotal + _money(expense.deductible_amount))
    total_expenses = round2(sum((subtotal for _, subtotal in by_category.values()), ZERO))

    total_mileage = round2(sum((_money(trip.miles) for trip in trips), ZERO))
    total_mileage_deduction = round2(sum((_money(trip.total) for trip in trips), ZERO))

    total_deductions = total_expenses + total_mileage_deduction
    net_profit = total_income - total_deductions

    if net_profit > 0:
        self_employment_tax = round2(net_profit * SELF_EMPLOYMENT_TAX_RATE)
        estimated_income_tax = round2((net_profit - self_employment_tax / 2) * INCOME_TAX_RATE)
    else:
        self_employment_tax = ZERO
        estimated_income_tax = ZERO

    return TaxSummary(
        start_date=start_date,
        end_date=end_date,
        total_income=total_income,
        total_expenses=total_expenses,
        total_mileage=total_mileage,
        total_mileage_deduction=total_mileage_deduction,
        total_deductions=total_deductions,
        net_profit=net_profit,
        self_employment_tax=self_employment_tax,
        estimated_income_tax=estimated_income_tax,
        total_estimated_tax=self_employment_tax + estimated_income_tax,
        paid_invoice_count=len(paid_totals),
        expense_count=len(expenses),
        mileage_record_count=len(trips),
        expenses_by_category={
            key: CategoryTotal(count=count, total=round2(subtotal))
            for key, (count, subtotal) in sorted(by_category.items())
        },
    )


def _month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def _month_label(day: date) -> str:
    return day.strftime("%b %Y")


def _average(total: Decimal, count: int) -> Decimal:
    return round2(total / count) if count else ZERO


def build_financial_report(db: Session, owner_id: int, start_date: date, end_date: date) -> FinancialReport:
    """Income from paid invoices against every expense in ``[start_date, end_date]``.

    Unlike the tax summary, expenses count at their full signed total whether
    or not they are deductible, and mileage is left out.
    """
    invoices = (
        db.query(Invoice)
        .filter(Invoice.owner_id == owner_id, Invoice.date >= start_date, Invoice.date <= end_date)
        .order_by(Invoice.date.asc(), Invoice.id.asc())
        .all()
    )
    expenses = (
        db.query(Expense)
        .filter(Expense.owner_id == owner_id, Expense.date >= start_date, Expense.date <= end_date)
        .order_by(Expense.date.asc(), Expense.id.asc())
        .all()
    )

    by_status = {status: 0 for status in INVOICE_STATUSES}
    months = {}
    total_income = ZERO
    total_pending = ZERO
    paid_count = 0
    for invoice in invoices:
        by_status[invoice.status] = by_status.get(invoice.status, 0) + 1
        amount = _money(invoice.total)
        if invoice.status == "paid":
            paid_count += 1
            total_income += amount
            month = months.setdefault(_month_key(invoice.date), [_month_label(invoice.date), ZERO, ZERO])
            month[1] += amount
        else:
            total_pending += amount

    by_category = {}
    total_expenses = ZERO
    for expense in expenses:
        amount = _money(expense.total)
        total_expenses += amount
        key = (expense.category or "").strip() or OTHER_CATEGORY
        count, subtotal = by_category.get(key, (0, ZERO))
        by_category[key] = (count + 1, subtotal + amount)
        month = months.setdefault(_month_key(expense.date), [_month_label(expense.date), ZERO, ZERO])
        month[2] += amount

    total_income = round2(total_income)
    total_expenses = round2(total_expenses)
    return FinancialReport(
        start_date=start_date,
        end_date=end_date,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        total_pending=round2(total_pending),
        invoice_count=len(invoices),
        paid_invoice_count=paid_count,
        expense_count=len(expenses),
        average_invoice=_average(total_income, paid_count),
        average_expense=_average(total_expenses, len(expenses)),
        invoices_by_status=by_status,
        expenses_by_category={
            key: CategoryTotal(count=count, total=round2(subtotal))
            for key, (count, subtotal) in sorted(by_category.items(), key=lambda entry: (-entry[1][1], entry[0]))
        },
        monthly=[
            MonthlyBreakdown(
                month=key,
                label=label,
                income=round2(income),
                expenses=round2(spent),
                profit=round2(income - spent),
            )
            for key, (label, income, spent) in sorted(months.items())
        ],
    )


def financial_report_filename(report: FinancialReport, extension: str) -> str:
    return f"ledgerly-report-{report.start_date.isoformat()}-to-{report.end_date.isoformat()}.{extension}"


def financial_report_csv(report: FinancialReport) -> str:
    """Monthly breakdown as CSV with plain decimal amounts."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["Month", "Income", "Expenses", "Profit"])
    for month in report.monthly:
        writer.writerow([month.label, f"{month.income:.2f}", f"{month.expenses:.2f}", f"{month.profit:.2f}"])
    writer.writerow(["Total", f"{report.total_income:.2f}", f"{report.total_expenses:.2f}", f"{report.net_profit:.2f}"])
    return output.getvalue()
