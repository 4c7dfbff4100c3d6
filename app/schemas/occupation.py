from pydantic import BaseModel
from datetime import date
from typing import List, Optional


class OccupationSlot(BaseModel):
    id: int
    kind: str
    status: str
    start_time: str
    end_time: str

    class Config:
        from_attributes = True


class FieldAvailability(BaseModel):
    field_id: int
    occupation_date: date
    occupied: List[OccupationSlot]
    # Sólo cuando se consulta un rango puntual
    is_available: Optional[bool] = None
