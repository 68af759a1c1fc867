"""Mileage log entries and their deduction totals."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ledgerly.app.core.settings import get_settings
from ledgerly.app.models.mileage import MileageEntry
from ledgerly.app.schemas.mileage import MileageCreate, MileageUpdate
from ledgerly.app.services.invoice_totals import ZERO, parse_decimal, round2

logger = logging.getLogger(__name__)


def default_rate_per_mile() -> Decimal:
    return Decimal(get_settings().default_mileage_rate)


def mileage_total(miles, rate_per_mile) -> Decimal:
    return round2(parse_decimal(miles, ZERO) * parse_decimal(rate_per_mile, ZERO))


def get_owned_entry(db: Session, entry_id: int, owner_id: int) -> Optional[MileageEntry]:
    return db.query(MileageEntry).filter(MileageEntry.id == entry_id, MileageEntry.owner_id == owner_id).first()


def list_entries(db: Session, owner_id: int) -> List[MileageEntry]:
    return (
        db.query(MileageEntry)
        .filter(MileageEntry.owner_id == owner_id)
        .order_by(MileageEntry.date.desc(), MileageEntry.id.desc())
        .all()
    )


def create_entry(db: Session, owner_id: int, payload: MileageCreate) -> MileageEntry:
    rate = payload.rate_per_mile if payload.rate_per_mile is not None else default_rate_per_mile()
    entry = MileageEntry(
        owner_id=owner_id,
        date=payload.date,
        purpose=payload.purpose,
        miles=payload.miles,
        rate_per_mile=rate,
        total=mileage_total(payload.miles, rate),
        notes=payload.notes,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Mileage recorded: id=%s miles=%s total=%s", entry.id, entry.miles, entry.total)
    return entry


def update_entry(db: Session, entry: MileageEntry, payload: MileageUpdate) -> MileageEntry:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "notes":
            continue
        setattr(entry, field, value)
    entry.total = mileage_total(entry.miles, entry.rate_per_mile)
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry: MileageEntry) -> None:
    db.delete(entry)
    db.commit()
