"""Business profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.business_settings import BusinessSettings
from ledgerly.app.models.user import User
from ledgerly.app.schemas.business_settings import BusinessSettingsRead, BusinessSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_or_create_business_settings(db: Session, owner_id: int) -> BusinessSettings:
    settings = db.query(BusinessSettings).filter(BusinessSettings.owner_id == owner_id).first()
    if settings:
        return settings
    settings = BusinessSettings(owner_id=owner_id)
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


@router.get("/business", response_model=BusinessSettingsRead)
async def get_business_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_or_create_business_settings(db, current_user.id)


@router.put("/business", response_model=BusinessSettingsRead)
async def update_business_settings(
    payload: BusinessSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    settings = _get_or_create_business_settings(db, current_user.id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if isinstance(value, str):
            value = value.strip() or None
        setattr(settings, field, value)
    db.commit()
    db.refresh(settings)
    return settings
