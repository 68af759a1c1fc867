"""CRUD operations for line item templates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ledgerly.app.models.line_item_template import LineItemTemplate
from ledgerly.app.schemas.invoice import LineItem
from ledgerly.app.schemas.line_item_template import LineItemTemplateCreate, LineItemTemplateUpdate
from ledgerly.app.services.invoice_totals import normalize_line_item


class CRUDLineItemTemplate:
    def create(self, db: Session, *, obj_in: LineItemTemplateCreate, owner_id: int) -> LineItemTemplate:
        obj = LineItemTemplate(owner_id=owner_id, **obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, template_id: int, owner_id: int) -> Optional[LineItemTemplate]:
        return (
            db.query(LineItemTemplate)
            .filter(LineItemTemplate.id == template_id, LineItemTemplate.owner_id == owner_id)
            .first()
        )

    def get_multi(self, db: Session, *, owner_id: int) -> List[LineItemTemplate]:
        return (
            db.query(LineItemTemplate)
            .filter(LineItemTemplate.owner_id == owner_id)
            .order_by(LineItemTemplate.name.asc(), LineItemTemplate.id.asc())
            .all()
        )

    def update(self, db: Session, *, db_obj: LineItemTemplate, obj_in: LineItemTemplateUpdate) -> LineItemTemplate:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: LineItemTemplate) -> LineItemTemplate:
        db.delete(db_obj)
        db.commit()
        return db_obj

    def to_line_item(self, db_obj: LineItemTemplate) -> LineItem:
        return normalize_line_item(
            {"name": db_obj.name, "description": db_obj.description, "rate": db_obj.rate, "quantity": db_obj.quantity}
        )


line_item_template_crud = CRUDLineItemTemplate()
