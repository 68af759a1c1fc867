"""Client directory entries. Invoices copy client details, they never link."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ledgerly.app.core.time import utc_now
from ledgerly.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    mobile = Column(String(50), nullable=True)
    fax = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)
    address = Column(String(512), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    contact_person = Column(String(255), nullable=True)
    tax_id = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="clients")

    def bill_to_fields(self) -> dict:
        address_parts = [self.address, self.city, self.state, self.postal_code]
        address = ", ".join(part for part in address_parts if part)
        return {
            "bill_to_name": self.name,
            "bill_to_email": self.email,
            "bill_to_address": address or None,
            "bill_to_phone": self.phone,
            "bill_to_mobile": self.mobile,
            "bill_to_fax": self.fax,
            "bill_to_website": self.website,
            "bill_to_business_number": self.tax_id,
            "bill_to_owner": self.contact_person,
        }
