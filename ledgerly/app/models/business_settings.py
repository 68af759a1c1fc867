"""Per-owner business profile used to seed the invoice issuer block."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ledgerly.app.core.time import utc_now
from ledgerly.app.db.base_class import Base


class BusinessSettings(Base):
    __tablename__ = "business_settings"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    business_name = Column(String(255), nullable=True)
    business_number = Column(String(100), nullable=True)
    business_owner = Column(String(255), nullable=True)
    business_address = Column(String(512), nullable=True)
    business_email = Column(String(255), nullable=True)
    business_phone = Column(String(50), nullable=True)
    business_mobile = Column(String(50), nullable=True)
    business_website = Column(String(255), nullable=True)
    default_invoice_note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="business_settings")

    def from_fields(self) -> dict:
        """Business profile mapped onto the invoice ``from_*`` columns."""
        return {
            "from_name": self.business_name,
            "from_business_number": self.business_number,
            "from_owner": self.business_owner,
            "from_address": self.business_address,
            "from_email": self.business_email,
            "from_phone": self.business_phone,
            "from_mobile": self.business_mobile,
            "from_website": self.business_website,
        }
