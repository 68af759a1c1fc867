"""Mileage log schemas."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MileageCreate(BaseModel):
    date: date_type
    purpose: str = Field(min_length=1)
    miles: Decimal = Field(ge=0)
    rate_per_mile: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class MileageUpdate(BaseModel):
    date: Optional[date_type] = None
    purpose: Optional[str] = Field(default=None, min_length=1)
    miles: Optional[Decimal] = Field(default=None, ge=0)
    rate_per_mile: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class MileageRead(BaseModel):
    id: int
    owner_id: int
    date: date_type
    purpose: str
    miles: Decimal
    rate_per_mile: Decimal
    total: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
