"""Line item template endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ledgerly.app.crud.crud_line_item_template import line_item_template_crud
from ledgerly.app.db.session import get_db
from ledgerly.app.dependencies.auth import get_current_user
from ledgerly.app.models.user import User
from ledgerly.app.schemas.invoice import LineItem
from ledgerly.app.schemas.line_item_template import (
    LineItemTemplateCreate,
    LineItemTemplateRead,
    LineItemTemplateUpdate,
)

router = APIRouter(prefix="/line-item-templates", tags=["line_item_templates"])


@router.post("/", response_model=LineItemTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_line_item_template(
    template_in: LineItemTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return line_item_template_crud.create(db, obj_in=template_in, owner_id=current_user.id)


@router.get("/", response_model=list[LineItemTemplateRead])
async def list_line_item_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return line_item_template_crud.get_multi(db, owner_id=current_user.id)


@router.get("/{template_id}", response_model=LineItemTemplateRead)
async def get_line_item_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = line_item_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item template not found")
    return template


@router.put("/{template_id}", response_model=LineItemTemplateRead)
async def update_line_item_template(
    template_id: int,
    template_in: LineItemTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = line_item_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item template not found")
    return line_item_template_crud.update(db, db_obj=template, obj_in=template_in)


@router.delete("/{template_id}", response_model=LineItemTemplateRead)
async def delete_line_item_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = line_item_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item template not found")
    return line_item_template_crud.delete(db, db_obj=template)


@router.post("/{template_id}/line-item", response_model=LineItem)
async def line_item_from_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = line_item_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item template not found")
    return line_item_template_crud.to_line_item(template)
