"""CRUD operations for clients."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ledgerly.app.models.client import Client
from ledgerly.app.schemas.client import ClientCreate, ClientUpdate


class CRUDClient:
    def create(self, db: Session, *, obj_in: ClientCreate, owner_id: int) -> Client:
        obj = Client(owner_id=owner_id, **obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, client_id: int, owner_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id, Client.owner_id == owner_id).first()

    def get_multi(self, db: Session, *, owner_id: int, active_only: bool = False) -> List[Client]:
        query = db.query(Client).filter(Client.owner_id == owner_id)
        if active_only:
            query = query.filter(Client.is_active.is_(True))
        return query.order_by(Client.name.asc(), Client.id.asc()).all()

    def update(self, db: Session, *, db_obj: Client, obj_in: ClientUpdate) -> Client:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: Client) -> Client:
        db.delete(db_obj)
        db.commit()
        return db_obj


client_crud = CRUDClient()
