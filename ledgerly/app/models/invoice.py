"""Invoice model. Party blocks are snapshots and totals are stored as of last save."""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ledgerly.app.core.time import utc_now
from ledgerly.app.db.base_class import Base

PARTY_FIELDS = (
    "name",
    "email",
    "address",
    "phone",
    "mobile",
    "fax",
    "website",
    "business_number",
    "owner",
)


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("owner_id", "invoice_number", name="uq_invoices_owner_number"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False)
    share_token = Column(String(64), nullable=True, unique=True, index=True)

    invoice_name = Column(String(255), nullable=False, default="Invoice")
    date = Column(Date, nullable=False)
    terms = Column(String(20), nullable=False, default="none")
    custom_terms = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="draft")

    from_name = Column(String(255), nullable=True)
    from_email = Column(String(255), nullable=True)
    from_address = Column(String(512), nullable=True)
    from_phone = Column(String(50), nullable=True)
    from_mobile = Column(String(50), nullable=True)
    from_fax = Column(String(50), nullable=True)
    from_website = Column(String(255), nullable=True)
    from_business_number = Column(String(100), nullable=True)
    from_owner = Column(String(255), nullable=True)

    bill_to_name = Column(String(255), nullable=True)
    bill_to_email = Column(String(255), nullable=True)
    bill_to_address = Column(String(512), nullable=True)
    bill_to_phone = Column(String(50), nullable=True)
    bill_to_mobile = Column(String(50), nullable=True)
    bill_to_fax = Column(String(50), nullable=True)
    bill_to_website = Column(String(255), nullable=True)
    bill_to_business_number = Column(String(100), nullable=True)
    bill_to_owner = Column(String(255), nullable=True)

    # List of LineItem dicts with decimals serialized as strings
    line_items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    balance_due = Column(Numeric(12, 2), nullable=False, default=0)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="invoices")
