"""Line item template schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LineItemTemplateBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    rate: Decimal = Decimal("0")
    quantity: Decimal = Decimal("1")


class LineItemTemplateCreate(LineItemTemplateBase):
    pass


class LineItemTemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    rate: Optional[Decimal] = None
    quantity: Optional[Decimal] = None


class LineItemTemplateRead(LineItemTemplateBase):
    id: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
