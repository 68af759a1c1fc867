"""Mileage log entries."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ledgerly.app.core.time import utc_now
from ledgerly.app.db.base_class import Base


class MileageEntry(Base):
    __tablename__ = "mileage"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    purpose = Column(String(255), nullable=False)
    miles = Column(Numeric(10, 2), nullable=False)
    rate_per_mile = Column(Numeric(6, 3), nullable=False)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="mileage_entries")
