from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.soccer_field import SoccerField
from app.schemas.soccer_field import SoccerFieldCreate, SoccerFieldUpdate


def get_soccer_field(
    db: Session, field_id: int, for_update: bool = False
) -> Optional[SoccerField]:
    query = db.query(SoccerField).filter(SoccerField.id == field_id)
    if for_update:
        # Bloqueo de fila: serializa las admisiones sobre la misma cancha
        query = query.with_for_update(nowait=False)
    return query.first()


def get_soccer_fields(
    db: Session, skip: int = 0, limit: int = 100, only_active: bool = True
) -> List[SoccerField]:
    query = db.query(SoccerField)
    if only_active:
        query = query.filter(SoccerField.is_active.is_(True))
    return query.order_by(SoccerField.id).offset(skip).limit(limit).all()


def create_soccer_field(
    db: Session, field: SoccerFieldCreate, owner_id: Optional[int] = None
) -> SoccerField:
    db_field = SoccerField(**field.model_dump(), owner_id=owner_id)
    db.add(db_field)
    db.commit()
    db.refresh(db_field)
    return db_field


def update_soccer_field(
    db: Session, field_id: int, field: SoccerFieldUpdate
) -> Optional[SoccerField]:
    db_field = get_soccer_field(db, field_id)
    if not db_field:
        return None

    update_data = field.model_dump(exclude_unset=True)
    for attribute, value in update_data.items():
        setattr(db_field, attribute, value)

    db.commit()
    db.refresh(db_field)
    return db_field
