"""Expense endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.expense import Expense
from ledgerly.app.models.user import User
from ledgerly.app.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from ledgerly.app.services.expenses import (
    OriginalExpenseNotFound,
    create_expense,
    delete_expense,
    get_owned_expense,
    list_expenses,
    update_expense,
)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _get_owned_expense(db: Session, expense_id: int, owner_id: int) -> Expense:
    expense = get_owned_expense(db, expense_id, owner_id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.get("/", response_model=List[ExpenseRead])
async def list_owner_expenses(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_expenses(db, current_user.id, category=category)


@router.post("/", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_owner_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return create_expense(db, current_user.id, payload)
    except OriginalExpenseNotFound:
        raise HTTPException(status_code=400, detail="Original expense not found")


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_expense(db, expense_id, current_user.id)


@router.put("/{expense_id}", response_model=ExpenseRead)
async def update_owner_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = _get_owned_expense(db, expense_id, current_user.id)
    try:
        return update_expense(db, expense, payload)
    except OriginalExpenseNotFound:
        raise HTTPException(status_code=400, detail="Original expense not found")


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_owner_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    expense = _get_owned_expense(db, expense_id, current_user.id)
    delete_expense(db, expense)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
