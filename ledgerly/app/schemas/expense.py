"""Expense schemas."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExpenseBase(BaseModel):
    merchant: str = Field(min_length=1)
    category: Optional[str] = None
    date: date_type
    total: Decimal
    tax: Optional[Decimal] = None
    description: Optional[str] = None
    is_tax_deductible: bool = False
    business_use_percentage: Decimal = Field(default=Decimal("100"), ge=0, le=100)
    tax_category: Optional[str] = None
    is_return: bool = False
    original_expense_id: Optional[int] = None
    notes: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    merchant: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    date: Optional[date_type] = None
    total: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    description: Optional[str] = None
    is_tax_deductible: Optional[bool] = None
    business_use_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    tax_category: Optional[str] = None
    is_return: Optional[bool] = None
    original_expense_id: Optional[int] = None
    notes: Optional[str] = None


class ExpenseRead(ExpenseBase):
    id: int
    owner_id: int
    deductible_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
