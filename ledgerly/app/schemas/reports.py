from datetime import date
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel


class CategoryTotal(BaseModel):
    count: int
    total: Decimal


class TaxSummary(BaseModel):
    """Estimated self-employment tax position for a date range."""

    start_date: date
    end_date: date
    total_income: Decimal
    total_expenses: Decimal
    total_mileage: Decimal
    total_mileage_deduction: Decimal
    total_deductions: Decimal
    net_profit: Decimal
    self_employment_tax: Decimal
    estimated_income_tax: Decimal
    total_estimated_tax: Decimal
    paid_invoice_count: int
    expense_count: int
    mileage_record_count: int
    expenses_by_category: Dict[str, CategoryTotal]


class MonthlyBreakdown(BaseModel):
    month: str
    label: str
    income: Decimal
    expenses: Decimal
    profit: Decimal


class FinancialReport(BaseModel):
    """Income, spending and profit for a date range, with a month-by-month split."""

    start_date: date
    end_date: date
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    total_pending: Decimal
    invoice_count: int
    paid_invoice_count: int
    expense_count: int
    average_invoice: Decimal
    average_expense: Decimal
    invoices_by_status: Dict[str, int]
    expenses_by_category: Dict[str, CategoryTotal]
    monthly: List[MonthlyBreakdown]
