"""Mileage log endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.mileage import MileageEntry
from ledgerly.app.models.user import User
from ledgerly.app.schemas.mileage import MileageCreate, MileageRead, MileageUpdate
from ledgerly.app.services.mileage import create_entry, delete_entry, get_owned_entry, list_entries, update_entry

router = APIRouter(prefix="/mileage", tags=["mileage"])


def _get_owned_entry(db: Session, entry_id: int, owner_id: int) -> MileageEntry:
    entry = get_owned_entry(db, entry_id, owner_id)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mileage entry not found")
    return entry


@router.get("/", response_model=List[MileageRead])
async def list_mileage(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return list_entries(db, current_user.id)


@router.post("/", response_model=MileageRead, status_code=status.HTTP_201_CREATED)
async def create_mileage(
    payload: MileageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_entry(db, current_user.id, payload)


@router.get("/{entry_id}", response_model=MileageRead)
async def get_mileage(entry_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_entry(db, entry_id, current_user.id)


@router.put("/{entry_id}", response_model=MileageRead)
async def update_mileage(
    entry_id: int,
    payload: MileageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_owned_entry(db, entry_id, current_user.id)
    return update_entry(db, entry, payload)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mileage(entry_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    entry = _get_owned_entry(db, entry_id, current_user.id)
    delete_entry(db, entry)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
