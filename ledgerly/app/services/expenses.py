"""Expense bookkeeping: signed totals and the deductible share."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ledgerly.app.models.expense import Expense
from ledgerly.app.schemas.expense import ExpenseCreate, ExpenseUpdate
from ledgerly.app.services.invoice_totals import ZERO, parse_decimal, round2

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

# Non-nullable columns; an explicit null in a partial update leaves them alone
_REQUIRED_FIELDS = {"merchant", "date", "total", "is_tax_deductible", "business_use_percentage", "is_return"}


class OriginalExpenseNotFound(LookupError):
    pass


def signed_total(total, is_return: bool) -> Decimal:
    """Returns are stored as negative amounts, everything else as positive."""
    amount = abs(round2(parse_decimal(total, ZERO)))
    return -amount if is_return else amount


def deductible_amount(total, is_tax_deductible: bool, business_use_percentage) -> Decimal:
    if not is_tax_deductible:
        return ZERO
    percentage = parse_decimal(business_use_percentage, HUNDRED)
    return round2(parse_decimal(total, ZERO) * percentage / HUNDRED)


def _refresh_derived(expense: Expense) -> None:
    expense.total = signed_total(expense.total, expense.is_return)
    expense.deductible_amount = deductible_amount(
        expense.total, expense.is_tax_deductible, expense.business_use_percentage
    )


def _check_original(db: Session, owner_id: int, original_expense_id: Optional[int]) -> None:
    if original_expense_id is None:
        return
    original = (
        db.query(Expense.id)
        .filter(Expense.id == original_expense_id, Expense.owner_id == owner_id)
        .first()
    )
    if original is None:
        raise OriginalExpenseNotFound(original_expense_id)


def get_owned_expense(db: Session, expense_id: int, owner_id: int) -> Optional[Expense]:
    return db.query(Expense).filter(Expense.id == expense_id, Expense.owner_id == owner_id).first()


def list_expenses(db: Session, owner_id: int, category: Optional[str] = None) -> List[Expense]:
    query = db.query(Expense).filter(Expense.owner_id == owner_id)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def create_expense(db: Session, owner_id: int, payload: ExpenseCreate) -> Expense:
    _check_original(db, owner_id, payload.original_expense_id)
    expense = Expense(owner_id=owner_id, **payload.model_dump())
    _refresh_derived(expense)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Expense recorded: id=%s total=%s deductible=%s", expense.id, expense.total, expense.deductible_amount)
    return expense


def update_expense(db: Session, expense: Expense, payload: ExpenseUpdate) -> Expense:
    update_data = payload.model_dump(exclude_unset=True)
    if "original_expense_id" in update_data:
        _check_original(db, expense.owner_id, update_data["original_expense_id"])
    for field, value in update_data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(expense, field, value)
    _refresh_derived(expense)
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense: Expense) -> None:
    expense_id = expense.id
    db.query(Expense).filter(Expense.original_expense_id == expense.id).update(
        {Expense.original_expense_id: None}, synchronize_session=False
    )
    db.delete(expense)
    db.commit()
    logger.info("Expense deleted: id=%s", expense_id)
