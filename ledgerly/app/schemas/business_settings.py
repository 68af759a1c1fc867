"""Business profile schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class BusinessSettingsBase(BaseModel):
    business_name: Optional[str] = None
    business_number: Optional[str] = None
    business_owner: Optional[str] = None
    business_address: Optional[str] = None
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = None
    business_mobile: Optional[str] = None
    business_website: Optional[str] = None
    default_invoice_note: Optional[str] = None


class BusinessSettingsUpdate(BusinessSettingsBase):
    pass


class BusinessSettingsRead(BusinessSettingsBase):
    id: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
