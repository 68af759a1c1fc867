"""Expense model."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ledgerly.app.core.time import utc_now
from ledgerly.app.db.base_class import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    merchant = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    date = Column(Date, nullable=False)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=True)
    description = Column(Text, nullable=True)
    is_tax_deductible = Column(Boolean, nullable=False, default=False)
    business_use_percentage = Column(Numeric(5, 2), nullable=False, default=100)
    tax_category = Column(String(100), nullable=True)
    deductible_amount = Column(Numeric(12, 2), nullable=False, default=0)
    is_return = Column(Boolean, nullable=False, default=False)
    original_expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="expenses")
