from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.database import get_db
from app.crud import soccer_field as crud
from app.crud import occupation as occupation_crud
from app.schemas.soccer_field import (
    SoccerFieldResponse,
    SoccerFieldCreate,
    SoccerFieldUpdate,
)
from app.schemas.occupation import FieldAvailability
from app.schemas.reservation import TIME_PATTERN
from app.services.auth import get_current_admin
from app.models.user import User
from app.utils.time_ranges import intervals_overlap, parse_time_to_minutes

router = APIRouter()


@router.post("/", response_model=SoccerFieldResponse)
def create_field(
    field: SoccerFieldCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if field.price_per_hour is not None and field.price_per_hour <= 0:
        raise HTTPException(
            status_code=400, detail="Price per hour must be greater than zero"
        )
    return crud.create_soccer_field(db=db, field=field, owner_id=current_admin.id)


@router.get("/", response_model=List[SoccerFieldResponse])
def read_fields(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_soccer_fields(db, skip=skip, limit=limit)


@router.get("/{field_id}", response_model=SoccerFieldResponse)
def read_field(field_id: int, db: Session = Depends(get_db)):
    db_field = crud.get_soccer_field(db, field_id=field_id)
    if db_field is None:
        raise HTTPException(status_code=404, detail="Soccer field not found")
    return db_field


@router.put("/{field_id}", response_model=SoccerFieldResponse)
def update_field(
    field_id: int,
    field: SoccerFieldUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if field.price_per_hour is not None and field.price_per_hour <= 0:
        raise HTTPException(
            status_code=400, detail="Price per hour must be greater than zero"
        )

    # Las canchas no se borran: tienen ocupaciones asociadas, se desactivan
    db_field = crud.update_soccer_field(db=db, field_id=field_id, field=field)
    if db_field is None:
        raise HTTPException(status_code=404, detail="Soccer field not found")
    return db_field


@router.get("/{field_id}/availability", response_model=FieldAvailability)
def read_field_availability(
    field_id: int,
    occupation_date: date = Query(..., description="Date to check (YYYY-MM-DD)"),
    start_time: Optional[str] = Query(None, pattern=TIME_PATTERN),
    end_time: Optional[str] = Query(None, pattern=TIME_PATTERN),
    db: Session = Depends(get_db),
):
    """
    Horarios ocupados de una cancha en una fecha: reservas y mejengas vigentes.

    Si se pasan start_time y end_time, is_available indica si ese rango está
    libre. Es sólo informativo: la reserva se decide al crearla.
    """
    db_field = crud.get_soccer_field(db, field_id=field_id)
    if db_field is None or not db_field.is_active:
        raise HTTPException(status_code=404, detail="Soccer field not found")

    occupied = occupation_crud.get_holding_occupations(db, field_id, occupation_date)

    is_available = None
    if start_time is not None or end_time is not None:
        if start_time is None or end_time is None:
            raise HTTPException(
                status_code=400, detail="start_time and end_time go together"
            )
        requested = (
            parse_time_to_minutes(start_time),
            parse_time_to_minutes(end_time),
        )
        if requested[0] < 0 or requested[1] <= requested[0]:
            raise HTTPException(
                status_code=400, detail="End time must be after start time"
            )
        is_available = not any(
            intervals_overlap(requested, (slot.start_minute, slot.end_minute))
            for slot in occupied
        )

    return {
        "field_id": field_id,
        "occupation_date": occupation_date,
        "occupied": occupied,
        "is_available": is_available,
    }
